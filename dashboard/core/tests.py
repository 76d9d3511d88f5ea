"""
Test suite for the core module
Tests: error classification, error presenter, REST client error mapping
"""
from unittest import mock

import requests
from django.template import Context, Template
from django.test import SimpleTestCase, override_settings

from dashboard.core.api_client import ApiClient
from dashboard.core.errors import (
    ERROR_COPY, UNKNOWN_FALLBACK_MESSAGE, ApiError, ErrorKind, ErrorReport, FailureSignal,
    classify_error, is_auth_error, is_network_error, is_server_error, is_timeout_error,
)
from dashboard.core.presenter import DEFAULT_COLOR, ErrorPresenter, color_for, icon_for
from dashboard.core.test_utils import TestDataFactory


class ErrorClassifierTests(SimpleTestCase):
    """Test classify_error rules and precedence"""

    def test_failed_to_fetch_is_network(self):
        """Test 'Failed to fetch' without a response is a network error"""
        report = classify_error(FailureSignal(message='Failed to fetch'))
        self.assertEqual(report.kind, ErrorKind.NETWORK)
        self.assertEqual(report.title, 'Connection Error')

    def test_failed_to_fetch_with_response_is_not_network(self):
        """Test a transport response disables the network rule"""
        report = classify_error(FailureSignal(message='Failed to fetch', response=object()))
        self.assertEqual(report.kind, ErrorKind.UNKNOWN)
        self.assertEqual(report.message, 'Failed to fetch')

    def test_network_rule_needs_exact_message(self):
        """Test the network rule is an equality check, not a substring check"""
        report = classify_error(FailureSignal(message='TypeError: Failed to fetch'))
        self.assertEqual(report.kind, ErrorKind.UNKNOWN)

    def test_not_found(self):
        """Test 404 messages"""
        report = classify_error(FailureSignal(message='Request failed: 404 Not Found'))
        self.assertEqual(report.kind, ErrorKind.NOT_FOUND)
        self.assertEqual(report.title, 'Resource Not Found')

    def test_forbidden(self):
        """Test 403 messages"""
        report = classify_error(FailureSignal(message='403 Forbidden: Access denied'))
        self.assertEqual(report.kind, ErrorKind.FORBIDDEN)

    def test_each_rule(self):
        """Test every rule on a message that only it matches"""
        cases = [
            ('Request timeout after 30s', ErrorKind.TIMEOUT),
            ('HTTP 500: Internal Server Error', ErrorKind.SERVER),
            ('Internal Server Error', ErrorKind.SERVER),
            ('Not Found', ErrorKind.NOT_FOUND),
            ('HTTP 401', ErrorKind.UNAUTHORIZED),
            ('Unauthorized', ErrorKind.UNAUTHORIZED),
            ('Forbidden', ErrorKind.FORBIDDEN),
            ('HTTP 400: Bad Request', ErrorKind.VALIDATION),
            ('Bad Request', ErrorKind.VALIDATION),
        ]
        for message, kind in cases:
            with self.subTest(message=message):
                self.assertEqual(classify_error(FailureSignal(message=message)).kind, kind)

    def test_timeout_precedes_server(self):
        """Test a message with both timeout and 500 classifies as timeout"""
        report = classify_error(FailureSignal(message='gateway timeout (500)'))
        self.assertEqual(report.kind, ErrorKind.TIMEOUT)

    def test_precedence_kept_for_ambiguous_codes(self):
        """Test 404 wins over 400 when both appear, following rule order"""
        report = classify_error(FailureSignal(message='400 Bad Request: referenced batch returned 404'))
        self.assertEqual(report.kind, ErrorKind.NOT_FOUND)

    def test_timeout_match_is_case_sensitive(self):
        """Test 'Timeout' with a capital T does not hit the timeout rule"""
        report = classify_error(FailureSignal(message='Timeout'))
        self.assertEqual(report.kind, ErrorKind.UNKNOWN)

    def test_unknown_echoes_message(self):
        """Test unknown reports keep the original message"""
        report = classify_error(FailureSignal(message='Something odd happened'))
        self.assertEqual(report.kind, ErrorKind.UNKNOWN)
        self.assertEqual(report.message, 'Something odd happened')
        self.assertEqual(report.title, 'An Error Occurred')

    def test_unknown_without_message_uses_fallback(self):
        """Test the generic fallback message"""
        for signal in (None, FailureSignal(), {}, object(), 42):
            with self.subTest(signal=signal):
                report = classify_error(signal)
                self.assertEqual(report.kind, ErrorKind.UNKNOWN)
                self.assertEqual(report.message, UNKNOWN_FALLBACK_MESSAGE)

    def test_accepts_arbitrary_failures(self):
        """Test dicts, plain exceptions and ApiError are all accepted"""
        self.assertEqual(classify_error({'message': 'Failed to fetch'}).kind, ErrorKind.NETWORK)
        self.assertEqual(classify_error(ValueError('HTTP 401')).kind, ErrorKind.UNAUTHORIZED)
        self.assertEqual(classify_error(ApiError('HTTP 500: Server Error')).kind, ErrorKind.SERVER)

    def test_never_raises_on_hostile_signal(self):
        """Test a signal whose attributes raise still classifies"""
        class Hostile:
            @property
            def message(self):
                raise RuntimeError('boom')

        report = classify_error(Hostile())
        self.assertEqual(report.kind, ErrorKind.UNKNOWN)

    def test_non_string_message(self):
        """Test non-string messages are stringified"""
        report = classify_error({'message': 404})
        self.assertEqual(report.kind, ErrorKind.NOT_FOUND)

    def test_static_copy_for_known_kinds(self):
        """Test known kinds use static copy and not the raw message"""
        report = classify_error(FailureSignal(message='HTTP 500: Internal Server Error'))
        self.assertEqual(report.message, ERROR_COPY[ErrorKind.SERVER].message)
        self.assertEqual(len(report.suggestions), 4)

    def test_report_is_fully_populated(self):
        """Test every kind yields a report with all fields present"""
        for kind in ErrorKind:
            copy = ERROR_COPY[kind]
            self.assertTrue(copy.title)
            self.assertTrue(copy.message)
            self.assertTrue(copy.details)
            self.assertIsInstance(copy.suggestions, tuple)

    def test_to_dict_shape(self):
        """Test the wire shape of a report"""
        data = classify_error(FailureSignal(message='Forbidden')).to_dict()
        self.assertEqual(set(data), {'kind', 'title', 'message', 'details', 'suggestions'})
        self.assertEqual(data['kind'], 'forbidden')
        self.assertIsInstance(data['suggestions'], list)

    def test_predicates(self):
        """Test the helper predicates"""
        self.assertTrue(is_network_error(FailureSignal(message='Failed to fetch')))
        self.assertFalse(is_network_error(FailureSignal(message='Failed to fetch', response=object())))
        self.assertTrue(is_timeout_error(FailureSignal(message='read timeout')))
        self.assertTrue(is_server_error(FailureSignal(message='Internal Server Error')))
        self.assertTrue(is_auth_error(FailureSignal(message='HTTP 403')))
        self.assertTrue(is_auth_error(FailureSignal(message='Unauthorized')))
        self.assertFalse(is_auth_error(FailureSignal(message='HTTP 404')))


class ErrorPresenterTests(SimpleTestCase):
    """Test the error display contract"""

    def setUp(self):
        self.report = classify_error(FailureSignal(message='HTTP 500: Internal Server Error'))

    def test_renders_nothing_without_report(self):
        """Test an empty presenter renders an empty string"""
        presenter = ErrorPresenter()
        self.assertEqual(presenter.render(), '')
        self.assertEqual(presenter.render(), '')

    def test_title_and_message_always_visible(self):
        """Test title and message render with details hidden"""
        html = ErrorPresenter(self.report).render()
        self.assertIn('Server Error', html)
        self.assertIn(self.report.message, html)
        self.assertIn('Show Details', html)
        self.assertNotIn('Suggestions:', html)
        self.assertNotIn(self.report.details, html)

    def test_details_block(self):
        """Test details, suggestions and raw message when expanded"""
        presenter = ErrorPresenter(self.report, raw_message='HTTP 500: Internal Server Error')
        presenter.toggle_details()
        html = presenter.render()
        self.assertIn('Hide Details', html)
        self.assertIn(self.report.details, html)
        self.assertIn('Suggestions:', html)
        self.assertIn('Check the server logs for more details', html)
        self.assertIn('<code', html)
        self.assertIn('HTTP 500: Internal Server Error', html)

    def test_suggestions_hidden_when_empty(self):
        """Test the suggestions list is omitted when there are none"""
        report = ErrorReport(ErrorKind.SERVER, 'Server Error', 'msg', 'details', ())
        html = ErrorPresenter(report, details_visible=True).render()
        self.assertIn('details', html)
        self.assertNotIn('Suggestions:', html)

    def test_technical_block_omitted_without_raw_message(self):
        """Test no code block when the signal had no message"""
        html = ErrorPresenter(self.report, details_visible=True).render()
        self.assertNotIn('Technical Details:', html)

    def test_kind_color_and_icon(self):
        """Test explicit mappings and the default bucket"""
        self.assertIn('orange', color_for(ErrorKind.NETWORK))
        self.assertEqual(color_for(ErrorKind.UNKNOWN), DEFAULT_COLOR)
        self.assertEqual(color_for('some-future-kind'), DEFAULT_COLOR)
        self.assertEqual(icon_for(ErrorKind.UNAUTHORIZED), icon_for(ErrorKind.FORBIDDEN))
        self.assertEqual(icon_for('some-future-kind'), 'alert')
        html = ErrorPresenter(classify_error(FailureSignal(message='Failed to fetch'))).render()
        self.assertIn('bg-orange-100', html)
        self.assertIn('data-error-kind="network"', html)

    def test_new_report_resets_toggle(self):
        """Test showing a new report hides the details again"""
        presenter = ErrorPresenter(self.report)
        self.assertTrue(presenter.toggle_details())
        presenter.show(classify_error(FailureSignal(message='Forbidden')))
        self.assertFalse(presenter.details_visible)
        self.assertEqual(presenter.report.kind, ErrorKind.FORBIDDEN)

    def test_dismiss_invokes_callback_once_per_action(self):
        """Test dismiss is never automatic and runs once per call"""
        on_dismiss = mock.Mock()
        presenter = ErrorPresenter(self.report, on_dismiss=on_dismiss)
        presenter.render()
        presenter.toggle_details()
        on_dismiss.assert_not_called()
        self.assertTrue(presenter.dismiss())
        on_dismiss.assert_called_once_with()
        presenter.dismiss()
        self.assertEqual(on_dismiss.call_count, 2)

    def test_dismiss_without_callback(self):
        """Test dismiss is a no-op without a callback"""
        presenter = ErrorPresenter(self.report)
        self.assertFalse(presenter.dismiss())
        self.assertNotIn('error-dismiss', presenter.render())

    def test_callback_alone_renders_no_dismiss_control(self):
        """Test a dismiss callback without a URL adds no dead control to the HTML"""
        presenter = ErrorPresenter(self.report, on_dismiss=mock.Mock())
        html = presenter.render()
        self.assertNotIn('error-dismiss', html)
        self.assertNotIn('<button', html)

    def test_dismiss_link_rendered(self):
        """Test a dismiss URL renders a dismiss link"""
        html = ErrorPresenter(self.report, dismiss_url='/inventory-logs/').render()
        self.assertIn('href="/inventory-logs/"', html)
        self.assertIn('error-dismiss', html)

    def test_from_signal_keeps_raw_message(self):
        """Test from_signal classifies and keeps the message verbatim"""
        presenter = ErrorPresenter.from_signal(ApiError('Request failed: 404 Not Found <batch>'))
        presenter.toggle_details()
        html = presenter.render()
        self.assertEqual(presenter.report.kind, ErrorKind.NOT_FOUND)
        self.assertIn('Request failed: 404 Not Found &lt;batch&gt;', html)

    def test_template_tag(self):
        """Test the error_display template tag"""
        template = Template('{% load error_display %}[{% error_display presenter %}]')
        self.assertEqual(template.render(Context({'presenter': None})), '[]')
        html = template.render(Context({'presenter': ErrorPresenter(self.report)}))
        self.assertIn('Server Error', html)


@override_settings(PHARMA_API_URL='http://backend.test', PHARMA_API_TOKEN='secret', PHARMA_API_TIMEOUT=5)
class ApiClientTests(SimpleTestCase):
    """Test REST client failure mapping"""

    def setUp(self):
        self.client_under_test = ApiClient.from_settings()

    def _patch_request(self, **kwargs):
        return mock.patch.object(self.client_under_test.session, 'request', **kwargs)

    def test_bearer_token_attached(self):
        """Test the configured token becomes an Authorization header"""
        self.assertEqual(self.client_under_test.session.headers['Authorization'], 'Bearer secret')

    def test_json_response(self):
        """Test JSON bodies are decoded"""
        response = TestDataFactory.http_response(json_data=[{'id': 1}])
        with self._patch_request(return_value=response) as request:
            data = self.client_under_test.get('/api/v1/inventoryLogs/', params={'changeType': 'SALE'})
        self.assertEqual(data, [{'id': 1}])
        request.assert_called_once_with(
            'GET', 'http://backend.test/api/v1/inventoryLogs/',
            params={'changeType': 'SALE'}, headers=None, timeout=5,
        )

    def test_no_content(self):
        """Test 204 responses return None"""
        response = TestDataFactory.http_response(status_code=204, reason='No Content')
        with self._patch_request(return_value=response):
            self.assertIsNone(self.client_under_test.get('/x'))

    def test_connection_error_is_network(self):
        """Test unreachable backends become network failures"""
        with self._patch_request(side_effect=requests.ConnectionError('refused')):
            with self.assertRaises(ApiError) as ctx:
                self.client_under_test.get('/x')
        self.assertIsNone(ctx.exception.response)
        self.assertEqual(classify_error(ctx.exception).kind, ErrorKind.NETWORK)

    def test_timeout_is_timeout(self):
        """Test client timeouts become timeout failures"""
        with self._patch_request(side_effect=requests.Timeout('read timed out')):
            with self.assertRaises(ApiError) as ctx:
                self.client_under_test.get('/x')
        self.assertEqual(classify_error(ctx.exception).kind, ErrorKind.TIMEOUT)

    def test_http_error_status_line(self):
        """Test non-JSON error bodies fall back to the status line"""
        response = TestDataFactory.http_response(status_code=404, reason='Not Found', content_type='text/html')
        with self._patch_request(return_value=response):
            with self.assertRaises(ApiError) as ctx:
                self.client_under_test.get('/x')
        self.assertEqual(ctx.exception.message, 'HTTP 404: Not Found')
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(classify_error(ctx.exception).kind, ErrorKind.NOT_FOUND)

    def test_http_error_prefers_backend_message(self):
        """Test the backend's message field replaces the status line"""
        response = TestDataFactory.http_response(
            status_code=403, reason='Forbidden', json_data={'message': 'Role PHARMACIST cannot view logs'},
        )
        with self._patch_request(return_value=response):
            with self.assertRaises(ApiError) as ctx:
                self.client_under_test.get('/x')
        self.assertEqual(ctx.exception.message, 'Role PHARMACIST cannot view logs')
        self.assertEqual(classify_error(ctx.exception).kind, ErrorKind.UNKNOWN)

    def test_request_bytes(self):
        """Test raw byte downloads send the Accept header"""
        response = TestDataFactory.http_response(content_type='text/csv', content=b'a,b')
        with self._patch_request(return_value=response) as request:
            data = self.client_under_test.request_bytes('GET', '/export', accept='text/csv')
        self.assertEqual(data, b'a,b')
        self.assertEqual(request.call_args.kwargs['headers'], {'Accept': 'text/csv'})
