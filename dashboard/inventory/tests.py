"""
Test suite for the Inventory Logs module
Tests: timestamp decoding, normalization, filtering, CSV export, viewer endpoints, export command
"""
import csv
import io
import os
import tempfile
import time
from datetime import date, datetime, timezone
from unittest import mock

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APIClient

from dashboard.core.errors import ApiError
from dashboard.core.test_utils import FakeInventoryLogsApi, TestDataFactory
from dashboard.inventory.api import InventoryLogsApi
from dashboard.inventory.exporters import (
    CSV_HEADERS, csv_download_response, export_filename, export_inventory_logs_csv, render_csv,
)
from dashboard.inventory.filters import (
    change_type_label, date_range_params, filter_inventory_logs, summarize_inventory_logs,
)
from dashboard.inventory.normalizers import (
    REASON_PLACEHOLDER, NormalizedAuditEntry, normalize_inventory_logs,
)
from dashboard.inventory.timestamps import (
    ArrayForm, ScalarForm, decode_timestamp, timestamp_from_wire,
)

NOW = datetime(2026, 10, 18, 9, 15, 0, tzinfo=timezone.utc)
NOW_ISO = '2026-10-18T09:15:00.000Z'


class TimestampDecoderTests(SimpleTestCase):
    """Test decode_timestamp for both wire forms"""

    def test_array_form_with_nanos(self):
        """Test the full seven-field array"""
        self.assertEqual(
            decode_timestamp(timestamp_from_wire([2024, 3, 5, 14, 30, 0, 500000000])),
            '2024-03-05T14:30:00.500Z',
        )

    def test_array_form_truncates_nanos(self):
        """Test nanos are truncated to milliseconds"""
        self.assertEqual(
            decode_timestamp(ArrayForm(2024, 12, 31, 23, 59, 59, 999999999)),
            '2024-12-31T23:59:59.999Z',
        )

    def test_array_form_missing_time_fields(self):
        """Test missing hour/minute/second/nanos default to zero"""
        self.assertEqual(decode_timestamp(timestamp_from_wire([2024, 1, 15])), '2024-01-15T00:00:00.000Z')
        self.assertEqual(decode_timestamp(timestamp_from_wire([2024, 1, 15, 8])), '2024-01-15T08:00:00.000Z')

    def test_array_form_is_utc(self):
        """Test components are read as UTC regardless of the process time zone"""
        if not hasattr(time, 'tzset'):
            self.skipTest('time.tzset is not available on this platform')
        self.addCleanup(time.tzset)
        with mock.patch.dict(os.environ, {'TZ': 'IST-05:30'}):
            time.tzset()
            self.assertEqual(time.localtime(0).tm_gmtoff, 19800)
            self.assertEqual(decode_timestamp(ArrayForm(2024, 3, 5, 0, 0)), '2024-03-05T00:00:00.000Z')
            self.assertEqual(decode_timestamp(ScalarForm('2024-03-05T00:00:00')), '2024-03-05T00:00:00.000Z')

    def test_years_below_1000_are_zero_padded(self):
        """Test the year is always four digits"""
        self.assertEqual(decode_timestamp(ArrayForm(999, 1, 1)), '0999-01-01T00:00:00.000Z')
        self.assertEqual(decode_timestamp(ArrayForm(5, 6, 7, 8, 9, 10)), '0005-06-07T08:09:10.000Z')

    def test_array_form_invalid(self):
        """Test impossible or malformed arrays decode to None"""
        for value in ([2024, 13, 40], [2024, 2, 30], [2024, 3], [], ['2024', 3, 5], [2024, 3, 5, 25]):
            with self.subTest(value=value):
                self.assertIsNone(decode_timestamp(timestamp_from_wire(value)))

    def test_scalar_iso_strings(self):
        """Test ISO strings are parsed and normalized to UTC"""
        self.assertEqual(decode_timestamp(ScalarForm('2024-03-05T14:30:00Z')), '2024-03-05T14:30:00.000Z')
        self.assertEqual(decode_timestamp(ScalarForm('2024-03-05T14:30:00.250Z')), '2024-03-05T14:30:00.250Z')
        self.assertEqual(
            decode_timestamp(ScalarForm('2024-03-05T20:00:00+05:30')), '2024-03-05T14:30:00.000Z',
        )
        self.assertEqual(decode_timestamp(ScalarForm('2024-03-05T14:30:00')), '2024-03-05T14:30:00.000Z')
        self.assertEqual(decode_timestamp(ScalarForm('2024-03-05')), '2024-03-05T00:00:00.000Z')

    def test_scalar_epoch_millis(self):
        """Test numeric scalars are epoch milliseconds"""
        self.assertEqual(decode_timestamp(ScalarForm(1709649000500)), '2024-03-05T14:30:00.500Z')

    def test_scalar_garbage(self):
        """Test unparseable scalars decode to None"""
        for value in ('not a date', '', '2024-13-45', True, {'a': 1}):
            with self.subTest(value=value):
                self.assertIsNone(decode_timestamp(ScalarForm(value)))

    def test_absent_input(self):
        """Test None decodes to None"""
        self.assertIsNone(timestamp_from_wire(None))
        self.assertIsNone(decode_timestamp(None))

    def test_wire_tagging(self):
        """Test lists become ArrayForm and everything else ScalarForm"""
        self.assertIsInstance(timestamp_from_wire([2024, 3, 5]), ArrayForm)
        self.assertIsInstance(timestamp_from_wire('2024-03-05'), ScalarForm)
        self.assertIsInstance(timestamp_from_wire(1709649000500), ScalarForm)


class NormalizerTests(SimpleTestCase):
    """Test normalize_inventory_logs"""

    def test_empty_and_non_list_input(self):
        """Test empty and non-list inputs normalize to an empty list"""
        self.assertEqual(normalize_inventory_logs([]), [])
        for value in (None, {'content': []}, 'logs', 42):
            with self.subTest(value=value):
                self.assertEqual(normalize_inventory_logs(value), [])

    def test_full_record(self):
        """Test a fully populated record"""
        raw = TestDataFactory.raw_log(sale={'saleId': 77}, adjustmentReference='ADJ-9')
        entry = normalize_inventory_logs([raw])[0]
        self.assertEqual(entry.id, 1)
        self.assertFalse(entry.id_is_synthetic)
        self.assertEqual(entry.product_name, 'Paracetamol 500mg')
        self.assertEqual(entry.sku, 'PARA-500')
        self.assertEqual(entry.batch_label, 'B-001')
        self.assertEqual(entry.change_type, 'SALE')
        self.assertEqual(entry.quantity_changed, -2)
        self.assertEqual(entry.sale_id, 77)
        self.assertIsNone(entry.purchase_id)
        self.assertEqual(entry.adjustment_reference, 'ADJ-9')
        self.assertEqual(entry.created_at, '2024-03-05T14:30:00.500Z')

    def test_sparse_record_defaults(self):
        """Test every field is defaulted on an empty record"""
        entry = normalize_inventory_logs([{}], now=NOW)[0]
        self.assertEqual(entry.product, {})
        self.assertEqual(entry.product_batch, {})
        self.assertEqual(entry.sale, {})
        self.assertEqual(entry.purchase, {})
        self.assertEqual(entry.change_type, 'UNKNOWN')
        self.assertEqual(entry.quantity_changed, 0)
        self.assertEqual(entry.reason, REASON_PLACEHOLDER)
        self.assertIsNone(entry.sale_id)
        self.assertIsNone(entry.purchase_id)
        self.assertIsNone(entry.adjustment_reference)
        self.assertEqual(entry.created_at, NOW_ISO)
        self.assertTrue(entry.id_is_synthetic)

    def test_undecodable_timestamp_falls_back_to_now(self):
        """Test undecodable timestamps are replaced by the current instant"""
        logs = [
            TestDataFactory.raw_log(log_id=1, created_at=[2024, 13, 40]),
            TestDataFactory.raw_log(log_id=2, created_at='garbage'),
        ]
        with self.assertLogs('dashboard.inventory.normalizers', level='WARNING'):
            entries = normalize_inventory_logs(logs, now=NOW)
        self.assertEqual([entry.created_at for entry in entries], [NOW_ISO, NOW_ISO])

    def test_purchase_id_from_nested_or_top_level(self):
        """Test purchaseId comes from the nested purchase, then the top level"""
        nested = TestDataFactory.raw_log(purchase={'purchaseId': 5}, purchaseId=6)
        top_level = TestDataFactory.raw_log(purchaseId=6)
        entries = normalize_inventory_logs([nested, top_level])
        self.assertEqual(entries[0].purchase_id, 5)
        self.assertEqual(entries[1].purchase_id, 6)

    def test_synthetic_ids_are_stable(self):
        """Test missing ids get the same synthetic id on every reload"""
        raw = TestDataFactory.raw_logs(2, change_type='ADJUSTMENT')
        for log in raw:
            del log['id']
        first = [entry.id for entry in normalize_inventory_logs(raw)]
        second = [entry.id for entry in normalize_inventory_logs(raw)]
        self.assertEqual(first, second)
        self.assertEqual(len(set(first)), 2)
        self.assertTrue(first[0].startswith('auto:10:'))

    def test_non_mapping_entries(self):
        """Test non-dict entries normalize as empty records"""
        entries = normalize_inventory_logs(['oops', None], now=NOW)
        self.assertEqual(len(entries), 2)
        self.assertEqual(entries[0].change_type, 'UNKNOWN')
        self.assertNotEqual(entries[0].id, entries[1].id)

    def test_input_not_mutated(self):
        """Test normalization leaves raw records alone"""
        raw = [{'changeType': 'IN'}]
        normalize_inventory_logs(raw)
        self.assertEqual(raw, [{'changeType': 'IN'}])


def _entries(count=10, matching=3):
    logs = []
    for index in range(count):
        name = 'Amoxicillin 250mg' if index < matching else f'Vitamin C {index}'
        logs.append(TestDataFactory.raw_log(log_id=index + 1, name=name, sku=f'SKU-{index}'))
    return normalize_inventory_logs(logs)


class FilterTests(SimpleTestCase):
    """Test viewer filtering helpers"""

    def test_search_fields(self):
        """Test search over name, SKU, reason and reference, case-insensitively"""
        entries = normalize_inventory_logs([
            TestDataFactory.raw_log(log_id=1, name='Ibuprofen'),
            TestDataFactory.raw_log(log_id=2, sku='XYZ-1'),
            TestDataFactory.raw_log(log_id=3, reason='Damaged in transit'),
            TestDataFactory.raw_log(log_id=4, adjustmentReference='AUDIT-2024'),
        ])
        self.assertEqual([e.id for e in filter_inventory_logs(entries, 'ibuprofen')], [1])
        self.assertEqual([e.id for e in filter_inventory_logs(entries, 'xyz')], [2])
        self.assertEqual([e.id for e in filter_inventory_logs(entries, 'TRANSIT')], [3])
        self.assertEqual([e.id for e in filter_inventory_logs(entries, 'audit-')], [4])
        self.assertEqual(len(filter_inventory_logs(entries, '')), 4)

    def test_change_type_filter(self):
        """Test change type filtering"""
        entries = normalize_inventory_logs([
            TestDataFactory.raw_log(log_id=1, change_type='SALE'),
            TestDataFactory.raw_log(log_id=2, change_type='PURCHASE'),
        ])
        self.assertEqual([e.id for e in filter_inventory_logs(entries, change_type='PURCHASE')], [2])
        self.assertEqual(len(filter_inventory_logs(entries, change_type='all')), 2)

    def test_date_range_params(self):
        """Test date range options become startDate/endDate params"""
        today = date(2026, 10, 18)
        self.assertEqual(date_range_params('today', today), {'startDate': '2026-10-18', 'endDate': '2026-10-18'})
        self.assertEqual(
            date_range_params('yesterday', today), {'startDate': '2026-10-17', 'endDate': '2026-10-17'},
        )
        self.assertEqual(date_range_params('7days', today), {'startDate': '2026-10-11', 'endDate': '2026-10-18'})
        self.assertEqual(date_range_params('90days', today)['startDate'], '2026-07-20')
        self.assertEqual(date_range_params('all', today), {})
        self.assertEqual(date_range_params('bogus', today), {})

    def test_summary(self):
        """Test summary card counts"""
        entries = normalize_inventory_logs([
            TestDataFactory.raw_log(log_id=1, change_type='PURCHASE'),
            TestDataFactory.raw_log(log_id=2, change_type='RETURN'),
            TestDataFactory.raw_log(log_id=3, change_type='SALE'),
            TestDataFactory.raw_log(log_id=4, change_type='ADJUSTMENT'),
            TestDataFactory.raw_log(log_id=5, change_type='EXPIRED'),
        ])
        self.assertEqual(
            summarize_inventory_logs(entries),
            {'total': 5, 'stock_in': 2, 'stock_out': 1, 'adjustments': 1},
        )

    def test_change_type_label(self):
        """Test labels fall back to the raw value"""
        self.assertEqual(change_type_label('TRANSFER_IN'), 'Transfer In')
        self.assertEqual(change_type_label('UNKNOWN'), 'UNKNOWN')


class CsvExporterTests(SimpleTestCase):
    """Test CSV rendering and the export artifact"""

    def test_header_only(self):
        """Test an empty export is just the header"""
        self.assertEqual(render_csv([]), ','.join(CSV_HEADERS))
        self.assertEqual(
            render_csv([]),
            'Product,SKU,Batch,ChangeType,QuantityChanged,Reason,SaleId,PurchaseId,AdjustmentReference,CreatedAt',
        )

    def test_row_values(self):
        """Test column order and empty cells for absent values"""
        entry = normalize_inventory_logs([TestDataFactory.raw_log(purchase={'purchaseId': 9})])[0]
        lines = render_csv([entry]).split('\n')
        self.assertEqual(len(lines), 2)
        self.assertEqual(
            lines[1],
            'Paracetamol 500mg,PARA-500,B-001,SALE,-2,Counter sale,,9,,2024-03-05T14:30:00.500Z',
        )

    def test_escaping(self):
        """Test quoting of commas, quotes and newlines, and that it parses back"""
        entry = NormalizedAuditEntry(
            id=1,
            created_at=NOW_ISO,
            product={'name': 'Acme, Inc."Best"', 'sku': 'plain'},
            reason='line one\nline two',
        )
        text = render_csv([entry])
        self.assertIn('"Acme, Inc.""Best"""', text)
        self.assertIn(',plain,', text)
        self.assertIn('"line one\nline two"', text)
        rows = list(csv.reader(io.StringIO(text)))
        self.assertEqual(rows[1][0], 'Acme, Inc."Best"')
        self.assertEqual(rows[1][5], 'line one\nline two')

    def test_bare_carriage_return_is_quoted(self):
        """Test a lone CR is quoted so the row survives a read back"""
        entry = normalize_inventory_logs([{'id': 1, 'reason': 'a\rb', 'createdAt': [2024, 1, 1]}])[0]
        text = render_csv([entry])
        self.assertEqual(text.split('\n')[1], ',,,UNKNOWN,0,"a\rb",,,,2024-01-01T00:00:00.000Z')
        rows = list(csv.reader(io.StringIO(text, newline='')))
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1][5], 'a\rb')

    def test_no_trailing_newline(self):
        """Test rows are newline-joined without a trailing newline"""
        text = render_csv(_entries(2, 0))
        self.assertFalse(text.endswith('\n'))
        self.assertEqual(text.count('\n'), 2)

    def test_export_only_filtered_subset(self):
        """Test 10 entries with 3 search matches export 3 data rows"""
        entries = _entries(10, 3)
        filtered = filter_inventory_logs(entries, 'amoxicillin')
        artifact = export_inventory_logs_csv(filtered, today=date(2026, 10, 18))
        lines = artifact.content.decode('utf-8').split('\n')
        self.assertEqual(len(lines), 4)
        self.assertEqual(artifact.row_count, 3)
        self.assertEqual(artifact.filename, 'inventory-logs-2026-10-18.csv')

    def test_utf8_artifact(self):
        """Test the artifact is UTF-8 encoded"""
        entry = normalize_inventory_logs([TestDataFactory.raw_log(reason=None)])[0]
        artifact = export_inventory_logs_csv([entry])
        self.assertIn(REASON_PLACEHOLDER.encode('utf-8'), artifact.content)
        self.assertEqual(artifact.content_type, 'text/csv; charset=utf-8')

    def test_filename(self):
        """Test filename format"""
        self.assertEqual(export_filename(date(2024, 3, 5)), 'inventory-logs-2024-03-05.csv')

    def test_download_response(self):
        """Test the artifact is sent as an attachment"""
        artifact = export_inventory_logs_csv([], today=date(2024, 3, 5))
        response = csv_download_response(artifact)
        self.assertEqual(response['Content-Type'], 'text/csv; charset=utf-8')
        self.assertEqual(
            response['Content-Disposition'], 'attachment; filename="inventory-logs-2024-03-05.csv"',
        )
        self.assertEqual(response.content, artifact.content)


class InventoryLogsApiTests(SimpleTestCase):
    """Test endpoint paths of the inventory-log service"""

    def setUp(self):
        self.client_mock = mock.Mock()
        self.api = InventoryLogsApi(self.client_mock)

    def test_get_all(self):
        """Test the listing hits the collection path with its query"""
        self.api.get_all({'changeType': 'SALE'})
        self.client_mock.get.assert_called_with('/api/v1/inventoryLogs/', params={'changeType': 'SALE'})
        self.api.get_all({})
        self.client_mock.get.assert_called_with('/api/v1/inventoryLogs/', params=None)

    def test_export(self):
        """Test the server-side export asks for CSV"""
        self.api.export()
        self.client_mock.request_bytes.assert_called_once_with(
            'GET', '/api/v1/inventoryLogs/export', params=None,
            accept='text/csv, application/octet-stream',
        )


class InventoryLogViewTests(SimpleTestCase):
    """Test the viewer pages and JSON endpoint"""

    def _patch_api(self, api):
        return mock.patch('dashboard.inventory.views.get_inventory_logs_api', return_value=api)

    def test_page_lists_filtered_logs(self):
        """Test the page shows only search matches and summary over all logs"""
        api = FakeInventoryLogsApi(TestDataFactory.raw_logs(2) + [
            TestDataFactory.raw_log(log_id=9, name='Cetirizine', change_type='PURCHASE'),
        ])
        with self._patch_api(api):
            response = self.client.get('/inventory-logs/', {'q': 'cetirizine'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Cetirizine')
        self.assertNotContains(response, 'Paracetamol 500mg')
        self.assertEqual(len(response.context['rows']), 1)
        self.assertEqual(response.context['summary']['total'], 3)
        self.assertIsNone(response.context['error_presenter'])

    def test_page_sends_backend_params(self):
        """Test change type and date range go to the backend"""
        api = FakeInventoryLogsApi([])
        with self._patch_api(api):
            self.client.get('/inventory-logs/', {'change_type': 'SALE', 'date_range': 'today'})
        params = api.calls[0]
        self.assertEqual(params['changeType'], 'SALE')
        self.assertEqual(params['startDate'], params['endDate'])

    def test_page_renders_classified_error(self):
        """Test backend failures are shown through the error presenter"""
        api = FakeInventoryLogsApi(error=ApiError('Failed to fetch'))
        with self._patch_api(api):
            response = self.client.get('/inventory-logs/')
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Connection Error')
        self.assertContains(response, 'Show Details')
        self.assertContains(response, 'No inventory logs found')

    def test_page_error_details_toggle(self):
        """Test details=1 expands the technical details"""
        api = FakeInventoryLogsApi(error=ApiError('HTTP 500: Internal Server Error'))
        with self._patch_api(api):
            response = self.client.get('/inventory-logs/', {'details': '1'})
        self.assertContains(response, 'Hide Details')
        self.assertContains(response, 'Technical Details:')
        self.assertContains(response, 'HTTP 500: Internal Server Error')

    def test_export_downloads_filtered_csv(self):
        """Test the export view downloads only the filtered subset"""
        logs = [TestDataFactory.raw_log(log_id=i, name='Amoxicillin' if i < 3 else 'Zinc') for i in range(10)]
        with self._patch_api(FakeInventoryLogsApi(logs)):
            response = self.client.get('/inventory-logs/export/', {'q': 'amox'})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response['Content-Disposition'].startswith('attachment; filename="inventory-logs-'))
        lines = response.content.decode('utf-8').split('\n')
        self.assertEqual(lines[0], ','.join(CSV_HEADERS))
        self.assertEqual(len(lines), 4)

    def test_export_failure_renders_error(self):
        """Test export failures render the page with a 502"""
        with self._patch_api(FakeInventoryLogsApi(error=ApiError('HTTP 403: Forbidden'))):
            response = self.client.get('/inventory-logs/export/')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertContains(response, 'Access Denied', status_code=502)

    def test_api_list(self):
        """Test the JSON endpoint"""
        api = FakeInventoryLogsApi([TestDataFactory.raw_log(), {'changeType': 'IN', 'createdAt': '2024-03-05'}])
        client = APIClient()
        with self._patch_api(api):
            response = client.get('/api/v1/inventory-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.json()
        self.assertEqual(data['count'], 2)
        self.assertEqual(data['summary']['stock_in'], 1)
        first, second = data['results']
        self.assertEqual(first['createdAt'], '2024-03-05T14:30:00.500Z')
        self.assertEqual(first['productBatch']['batchNumber'], 'B-001')
        self.assertFalse(first['idIsSynthetic'])
        self.assertTrue(second['idIsSynthetic'])
        self.assertEqual(second['createdAt'], '2024-03-05T00:00:00.000Z')
        self.assertEqual(second['reason'], REASON_PLACEHOLDER)

    def test_api_list_error(self):
        """Test the JSON endpoint returns the error report on failure"""
        client = APIClient()
        with self._patch_api(FakeInventoryLogsApi(error=ApiError('Request failed: 404 Not Found'))):
            response = client.get('/api/v1/inventory-logs/')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        data = response.json()
        self.assertEqual(data['kind'], 'notfound')
        self.assertEqual(data['title'], 'Resource Not Found')
        self.assertIsInstance(data['suggestions'], list)


class ExportCommandTests(SimpleTestCase):
    """Test the export_inventory_logs management command"""

    def test_writes_csv(self):
        """Test the command writes the filtered export"""
        api = FakeInventoryLogsApi(TestDataFactory.raw_logs(3, change_type='SALE') + [
            TestDataFactory.raw_log(log_id=7, change_type='PURCHASE'),
        ])
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch('dashboard.inventory.views.get_inventory_logs_api', return_value=api):
                call_command('export_inventory_logs', output_dir=tmp, change_type='PURCHASE', stdout=out)
            files = os.listdir(tmp)
            self.assertEqual(len(files), 1)
            self.assertTrue(files[0].startswith('inventory-logs-'))
            with open(os.path.join(tmp, files[0]), encoding='utf-8') as fh:
                self.assertEqual(len(fh.read().split('\n')), 2)
        self.assertIn('Exported 1 of 4 inventory logs', out.getvalue())
        self.assertEqual(api.calls[0], {'changeType': 'PURCHASE'})

    def test_server_side_export(self):
        """Test --server-side saves the backend's CSV bytes with the backend filters"""
        content = b'Product,SKU\nAmoxicillin,AMX-250'
        api = FakeInventoryLogsApi(export_content=content)
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch('dashboard.inventory.views.get_inventory_logs_api', return_value=api):
                call_command(
                    'export_inventory_logs', output_dir=tmp, change_type='SALE', server_side=True, stdout=out,
                )
            files = os.listdir(tmp)
            self.assertEqual(len(files), 1)
            self.assertTrue(files[0].startswith('inventory-logs-'))
            with open(os.path.join(tmp, files[0]), 'rb') as fh:
                self.assertEqual(fh.read(), content)
        self.assertEqual(api.calls, [{'changeType': 'SALE'}])
        self.assertIn('Saved the backend export to', out.getvalue())

    def test_server_side_rejects_search(self):
        """Test search has no server-side counterpart"""
        api = FakeInventoryLogsApi()
        with mock.patch('dashboard.inventory.views.get_inventory_logs_api', return_value=api):
            with self.assertRaises(CommandError):
                call_command('export_inventory_logs', search='amox', server_side=True, stdout=io.StringIO())
        self.assertEqual(api.calls, [])

    def test_server_side_failure(self):
        """Test a failing backend export is classified like a failing listing"""
        api = FakeInventoryLogsApi(error=ApiError('Failed to fetch'))
        out = io.StringIO()
        with mock.patch('dashboard.inventory.views.get_inventory_logs_api', return_value=api):
            with self.assertRaises(CommandError):
                call_command('export_inventory_logs', server_side=True, stdout=out)
        self.assertIn('Connection Error', out.getvalue())

    def test_backend_failure(self):
        """Test backend failures become a CommandError with the classified report"""
        api = FakeInventoryLogsApi(error=ApiError('Request timeout after 30s'))
        out = io.StringIO()
        with mock.patch('dashboard.inventory.views.get_inventory_logs_api', return_value=api):
            with self.assertRaises(CommandError):
                call_command('export_inventory_logs', stdout=out)
        self.assertIn('Request Timeout', out.getvalue())
