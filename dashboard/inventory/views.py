import logging

from django.shortcuts import render
from django.urls import reverse
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from dashboard.core.errors import ApiError, classify_error
from dashboard.core.presenter import ErrorPresenter
from dashboard.core.serializers import ErrorReportSerializer
from .api import get_inventory_logs_api
from .exporters import (
    CsvArtifact, csv_download_response, export_filename, export_inventory_logs_csv,
)
from .filters import (
    CHANGE_TYPE_OPTIONS, DATE_RANGE_OPTIONS,
    change_type_direction, change_type_label, date_range_params,
    filter_inventory_logs, summarize_inventory_logs,
)
from .normalizers import normalize_inventory_logs
from .serializers import InventoryLogListSerializer

logger = logging.getLogger(__name__)


def filters_from_query(query):
    """Viewer filter state from GET params"""
    return {
        'search': (query.get('q') or '').strip(),
        'change_type': query.get('change_type') or 'all',
        'date_range': query.get('date_range') or 'all',
    }


def backend_params(filters):
    params = {}
    if filters['change_type'] != 'all':
        params['changeType'] = filters['change_type']
    params.update(date_range_params(filters['date_range']))
    return params


def load_inventory_logs(filters, api=None):
    """
    Fetch, normalize and filter one listing.

    Returns ``(all_entries, filtered_entries)``. ApiError from the backend
    propagates to the caller.
    """
    api = api or get_inventory_logs_api()
    raw_logs = api.get_all(backend_params(filters))
    entries = normalize_inventory_logs(raw_logs)
    return entries, filter_inventory_logs(entries, filters['search'], filters['change_type'])


def fetch_server_export(filters, api=None):
    """
    The backend's own CSV export for the given filters, as a CsvArtifact.

    Only the change-type and date-range filters reach the backend; search is
    applied locally and so has no server-side counterpart.
    """
    api = api or get_inventory_logs_api()
    return CsvArtifact(filename=export_filename(), content=api.export(backend_params(filters)))


def _url(request, name, **overrides):
    """URL for a named view carrying the current query, with overrides (None drops a key)"""
    query = request.GET.copy()
    for key, value in overrides.items():
        if value is None:
            query.pop(key, None)
        else:
            query[key] = value
    encoded = query.urlencode()
    path = reverse(name)
    return f'{path}?{encoded}' if encoded else path


def _error_presenter(request, error):
    details_visible = request.GET.get('details') == '1'
    return ErrorPresenter.from_signal(
        error,
        details_visible=details_visible,
        dismiss_url=_url(request, 'inventory-log-page', details=None),
        details_url=_url(request, 'inventory-log-page', details=None if details_visible else '1'),
    )


def _rows(entries):
    return [
        {
            'entry': entry,
            'label': change_type_label(entry.change_type),
            'direction': change_type_direction(entry.change_type),
        }
        for entry in entries
    ]


def _render_page(request, filters, entries=(), filtered=(), presenter=None, status_code=200):
    context = {
        'filters': filters,
        'change_type_options': CHANGE_TYPE_OPTIONS,
        'date_range_options': DATE_RANGE_OPTIONS,
        'summary': summarize_inventory_logs(list(entries)),
        'rows': _rows(filtered),
        'error_presenter': presenter,
        'export_url': _url(request, 'inventory-log-export', details=None),
    }
    return render(request, 'inventory/inventory_logs.html', context, status=status_code)


def inventory_log_page(request):
    """Inventory log viewer: summary cards, filters, search and the log table"""
    filters = filters_from_query(request.GET)
    try:
        entries, filtered = load_inventory_logs(filters)
    except ApiError as e:
        report = classify_error(e)
        logger.warning(f"Loading inventory logs failed ({report.kind.value}): {e.message}")
        return _render_page(request, filters, presenter=_error_presenter(request, e))
    return _render_page(request, filters, entries, filtered)


def inventory_log_export(request):
    """Download the currently filtered logs as CSV"""
    filters = filters_from_query(request.GET)
    try:
        _, filtered = load_inventory_logs(filters)
    except ApiError as e:
        report = classify_error(e)
        logger.warning(f"Exporting inventory logs failed ({report.kind.value}): {e.message}")
        return _render_page(
            request, filters, presenter=_error_presenter(request, e),
            status_code=status.HTTP_502_BAD_GATEWAY,
        )
    return csv_download_response(export_inventory_logs_csv(filtered))


@api_view(['GET'])
def inventory_log_list_api(request):
    """Normalized, filtered inventory logs as JSON"""
    filters = filters_from_query(request.query_params)
    try:
        entries, filtered = load_inventory_logs(filters)
    except ApiError as e:
        report = classify_error(e)
        logger.warning(f"Inventory log API failed ({report.kind.value}): {e.message}")
        return Response(ErrorReportSerializer(report).data, status=status.HTTP_502_BAD_GATEWAY)

    serializer = InventoryLogListSerializer({
        'count': len(filtered),
        'summary': summarize_inventory_logs(entries),
        'results': filtered,
    })
    return Response(serializer.data)
