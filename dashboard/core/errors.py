"""
Error classification for failed calls to the inventory REST backend.

Every failure that reaches the dashboard is reduced to an ErrorReport: a
fixed kind plus the user-facing copy shown by the error presenter.
Classification is an ordered list of rules, first match wins. The order
matters: a message mentioning both "timeout" and "500" is a timeout.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple


NETWORK_FAILURE_MESSAGE = 'Failed to fetch'
UNKNOWN_FALLBACK_MESSAGE = 'An unexpected error occurred while processing your request.'


class ErrorKind(str, Enum):
    NETWORK = 'network'
    TIMEOUT = 'timeout'
    SERVER = 'server'
    NOT_FOUND = 'notfound'
    UNAUTHORIZED = 'unauthorized'
    FORBIDDEN = 'forbidden'
    VALIDATION = 'validation'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class ErrorReport:
    kind: ErrorKind
    title: str
    message: str
    details: str
    suggestions: Tuple[str, ...] = ()

    def to_dict(self):
        """Wire/display shape consumed by the presentation layer"""
        return {
            'kind': self.kind.value,
            'title': self.title,
            'message': self.message,
            'details': self.details,
            'suggestions': list(self.suggestions),
        }


@dataclass(frozen=True)
class FailureSignal:
    """Plain failure value for callers that don't have an exception at hand"""
    message: Optional[str] = None
    response: Any = None


class ApiError(Exception):
    """Raised by the REST client when a request to the backend fails"""

    def __init__(self, message, response=None):
        super().__init__(message)
        self.message = message
        self.response = response

    @property
    def status_code(self):
        return getattr(self.response, 'status_code', None)


@dataclass(frozen=True)
class _Copy:
    title: str
    message: str
    details: str
    suggestions: Tuple[str, ...] = field(default_factory=tuple)


ERROR_COPY = {
    ErrorKind.NETWORK: _Copy(
        title='Connection Error',
        message=(
            'Unable to connect to the server. Please check your internet connection '
            'and ensure the backend server is running.'
        ),
        details="This usually means the backend server is not running or there's a network connectivity issue.",
        suggestions=(
            'Check if the backend server is running on http://localhost:8080',
            'Verify your internet connection',
            'Try refreshing the page',
            'Contact your system administrator if the problem persists',
        ),
    ),
    ErrorKind.TIMEOUT: _Copy(
        title='Request Timeout',
        message='The request took too long to complete. The server might be overloaded.',
        details='This usually means the server is taking too long to respond to your request.',
        suggestions=(
            'Try again in a few moments',
            'Check if the server is experiencing high load',
            'Contact your system administrator if the problem persists',
        ),
    ),
    ErrorKind.SERVER: _Copy(
        title='Server Error',
        message='The server encountered an unexpected error while processing your request.',
        details='This indicates a problem on the server side that needs to be addressed.',
        suggestions=(
            'Try again in a few moments',
            'Check if the backend service is properly configured',
            'Contact your system administrator',
            'Check the server logs for more details',
        ),
    ),
    ErrorKind.NOT_FOUND: _Copy(
        title='Resource Not Found',
        message='The requested resource could not be found on the server.',
        details="This usually means the API endpoint doesn't exist or the resource has been moved.",
        suggestions=(
            'Verify the API endpoint is correct',
            'Check if the resource still exists',
            'Contact your system administrator',
            'Try refreshing the page',
        ),
    ),
    ErrorKind.UNAUTHORIZED: _Copy(
        title='Authentication Required',
        message='You need to log in to access this resource.',
        details='Your session may have expired or you may not have the required permissions.',
        suggestions=(
            'Please log in again',
            'Check if your session has expired',
            'Contact your administrator if you believe this is an error',
        ),
    ),
    ErrorKind.FORBIDDEN: _Copy(
        title='Access Denied',
        message="You don't have permission to access this resource.",
        details="Your account doesn't have the required permissions for this action.",
        suggestions=(
            'Contact your administrator to request access',
            "Check if you're using the correct account",
            'Verify your role has the necessary permissions',
        ),
    ),
    ErrorKind.VALIDATION: _Copy(
        title='Invalid Request',
        message='The request data is invalid or incomplete.',
        details='Please check your input and try again.',
        suggestions=(
            'Review the form data for any missing or invalid fields',
            'Check if all required fields are filled',
            'Verify the data format is correct',
        ),
    ),
    ErrorKind.UNKNOWN: _Copy(
        title='An Error Occurred',
        message=UNKNOWN_FALLBACK_MESSAGE,
        details='Please try again or contact support if the problem persists.',
        suggestions=(
            'Try refreshing the page',
            'Check your internet connection',
            'Contact your system administrator',
            'Try again in a few moments',
        ),
    ),
}


def signal_message(signal) -> Optional[str]:
    """
    Extract the free-text message from an arbitrary failure value.

    Accepts objects exposing ``message`` (ApiError, FailureSignal), mappings
    with a ``message`` key, and plain exceptions (their ``str()``). Returns
    None when nothing usable is found. Never raises.
    """
    if signal is None:
        return None
    try:
        if isinstance(signal, dict):
            message = signal.get('message')
        else:
            message = getattr(signal, 'message', None)
            if message is None and isinstance(signal, BaseException):
                message = str(signal)
        if message is None:
            return None
        return message if isinstance(message, str) else str(message)
    except Exception:
        return None


def signal_response(signal):
    """Transport response attached to the failure, if any. Never raises."""
    if signal is None:
        return None
    try:
        if isinstance(signal, dict):
            return signal.get('response')
        return getattr(signal, 'response', None)
    except Exception:
        return None


def _contains(*needles):
    def predicate(message, response):
        return bool(message) and any(needle in message for needle in needles)
    return predicate


def _no_response_failed_fetch(message, response):
    return response is None and message == NETWORK_FAILURE_MESSAGE


# First match wins. Do not reorder.
CLASSIFICATION_RULES = (
    (_no_response_failed_fetch, ErrorKind.NETWORK),
    (_contains('timeout'), ErrorKind.TIMEOUT),
    (_contains('500', 'Internal Server Error'), ErrorKind.SERVER),
    (_contains('404', 'Not Found'), ErrorKind.NOT_FOUND),
    (_contains('401', 'Unauthorized'), ErrorKind.UNAUTHORIZED),
    (_contains('403', 'Forbidden'), ErrorKind.FORBIDDEN),
    (_contains('400', 'Bad Request'), ErrorKind.VALIDATION),
)


def classify_kind(signal) -> ErrorKind:
    message = signal_message(signal)
    response = signal_response(signal)
    for predicate, kind in CLASSIFICATION_RULES:
        if predicate(message, response):
            return kind
    return ErrorKind.UNKNOWN


def build_report(kind: ErrorKind, message: Optional[str] = None) -> ErrorReport:
    """Assemble the static copy for a kind; only unknown echoes the raw message"""
    copy = ERROR_COPY.get(kind, ERROR_COPY[ErrorKind.UNKNOWN])
    text = copy.message
    if kind == ErrorKind.UNKNOWN and message:
        text = message
    return ErrorReport(
        kind=kind,
        title=copy.title,
        message=text,
        details=copy.details,
        suggestions=tuple(copy.suggestions),
    )


def classify_error(signal) -> ErrorReport:
    """
    Map any failure value to an ErrorReport.

    Total and deterministic: unrecognised failures become ``unknown`` with
    the original message preserved so operators can still see it.
    """
    return build_report(classify_kind(signal), signal_message(signal))


def is_network_error(signal) -> bool:
    return _no_response_failed_fetch(signal_message(signal), signal_response(signal))


def is_timeout_error(signal) -> bool:
    return _contains('timeout')(signal_message(signal), None)


def is_server_error(signal) -> bool:
    return _contains('500', 'Internal Server Error')(signal_message(signal), None)


def is_auth_error(signal) -> bool:
    return _contains('401', '403', 'Unauthorized', 'Forbidden')(signal_message(signal), None)
