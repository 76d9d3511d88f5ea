"""
Display contract for ErrorReports.

An ErrorPresenter owns one report at a time plus a details-visible flag.
It renders nothing without a report, never dismisses itself, and resets the
details flag whenever a new report replaces the old one.
"""
from django.template.loader import render_to_string

from .errors import ErrorKind, classify_error, signal_message


ICON_PATHS = {
    'network': (
        'M3 4a1 1 0 011-1h12a1 1 0 011 1v2a1 1 0 01-1 1H4a1 1 0 01-1-1V4zM3 10a1 1 0 011-1h6a1 1 0 011 1v6'
        'a1 1 0 01-1 1H4a1 1 0 01-1-1v-6zM14 9a1 1 0 00-1 1v6a1 1 0 001 1h2a1 1 0 001-1v-6a1 1 0 00-1-1h-2z'
    ),
    'clock': (
        'M10 18a8 8 0 100-16 8 8 0 000 16zm1-12a1 1 0 10-2 0v4a1 1 0 00.293.707l2.828 2.829a1 1 0 '
        '101.415-1.415L11 9.586V6z'
    ),
    'alert': (
        'M18 10a8 8 0 11-16 0 8 8 0 0116 0zm-7 4a1 1 0 11-2 0 1 1 0 012 0zm-1-9a1 1 0 00-1 1v4a1 1 0 '
        '102 0V6a1 1 0 00-1-1z'
    ),
    'cross': (
        'M18 10a8 8 0 11-16 0 8 8 0 0116 0zM8.707 7.293a1 1 0 00-1.414 1.414L8.586 10l-1.293 1.293a1 1 0 '
        '101.414 1.414L10 11.414l1.293 1.293a1 1 0 001.414-1.414L11.414 10l1.293-1.293a1 1 0 '
        '00-1.414-1.414L10 8.586 8.707 7.293z'
    ),
    'lock': (
        'M5 9V7a5 5 0 0110 0v2a2 2 0 012 2v5a2 2 0 01-2 2H5a2 2 0 01-2-2v-5a2 2 0 012-2zm8-2v2H7V7a3 3 0 016 0z'
    ),
}

KIND_ICONS = {
    ErrorKind.NETWORK: 'network',
    ErrorKind.TIMEOUT: 'clock',
    ErrorKind.SERVER: 'alert',
    ErrorKind.NOT_FOUND: 'cross',
    ErrorKind.UNAUTHORIZED: 'lock',
    ErrorKind.FORBIDDEN: 'lock',
    ErrorKind.VALIDATION: 'alert',
}
DEFAULT_ICON = 'alert'

KIND_COLORS = {
    ErrorKind.NETWORK: 'bg-orange-100 border-orange-400 text-orange-800',
    ErrorKind.TIMEOUT: 'bg-yellow-100 border-yellow-400 text-yellow-800',
    ErrorKind.SERVER: 'bg-red-100 border-red-400 text-red-800',
    ErrorKind.NOT_FOUND: 'bg-purple-100 border-purple-400 text-purple-800',
    ErrorKind.UNAUTHORIZED: 'bg-indigo-100 border-indigo-400 text-indigo-800',
    ErrorKind.FORBIDDEN: 'bg-indigo-100 border-indigo-400 text-indigo-800',
    ErrorKind.VALIDATION: 'bg-blue-100 border-blue-400 text-blue-800',
}
DEFAULT_COLOR = 'bg-red-100 border-red-400 text-red-800'


def icon_for(kind):
    """Icon name for a kind; anything not listed (unknown included) gets the default"""
    return KIND_ICONS.get(kind, DEFAULT_ICON)


def color_for(kind):
    return KIND_COLORS.get(kind, DEFAULT_COLOR)


class ErrorPresenter:
    template_name = 'core/error_display.html'

    def __init__(self, report=None, on_dismiss=None, raw_message=None,
                 details_visible=False, dismiss_url=None, details_url=None):
        self.report = report
        self.on_dismiss = on_dismiss
        self.raw_message = raw_message
        self.details_visible = details_visible
        self.dismiss_url = dismiss_url
        self.details_url = details_url

    @classmethod
    def from_signal(cls, signal, **kwargs):
        """Classify a raw failure and keep its message for the technical block"""
        return cls(report=classify_error(signal), raw_message=signal_message(signal), **kwargs)

    @property
    def is_empty(self):
        return self.report is None

    def show(self, report, raw_message=None):
        self.report = report
        self.raw_message = raw_message
        self.details_visible = False

    def toggle_details(self):
        self.details_visible = not self.details_visible
        return self.details_visible

    def dismiss(self):
        """
        Run the dismiss callback once for this action; False if none was supplied.

        Programmatic only: the rendered HTML offers a dismiss link just when
        ``dismiss_url`` is set.
        """
        if self.on_dismiss is None:
            return False
        self.on_dismiss()
        return True

    def get_context(self):
        report = self.report
        return {
            'report': report,
            'kind': report.kind.value,
            'icon_path': ICON_PATHS[icon_for(report.kind)],
            'color_class': color_for(report.kind),
            'details_visible': self.details_visible,
            'suggestions': list(report.suggestions),
            'raw_message': self.raw_message,
            'dismiss_url': self.dismiss_url,
            'details_url': self.details_url,
        }

    def render(self):
        if self.report is None:
            return ''
        return render_to_string(self.template_name, self.get_context())
