"""
Client-side filtering for the inventory-log viewer.

Search and change-type matching run over already normalized entries; the
date-range selector is turned into query params for the backend instead.
"""
from datetime import timedelta

from django.utils import timezone


CHANGE_TYPE_OPTIONS = [
    ('all', 'All Types'),
    ('IN', 'Stock In'),
    ('OUT', 'Stock Out'),
    ('SALE', 'Sale'),
    ('PURCHASE', 'Purchase'),
    ('ADJUSTMENT', 'Adjustment'),
    ('TRANSFER_IN', 'Transfer In'),
    ('TRANSFER_OUT', 'Transfer Out'),
    ('RETURN', 'Return'),
    ('EXPIRED', 'Expired'),
]

DATE_RANGE_OPTIONS = [
    ('all', 'All Time'),
    ('today', 'Today'),
    ('yesterday', 'Yesterday'),
    ('7days', 'Last 7 Days'),
    ('30days', 'Last 30 Days'),
    ('90days', 'Last 90 Days'),
]

STOCK_IN_TYPES = frozenset({'IN', 'PURCHASE', 'TRANSFER_IN', 'RETURN'})
STOCK_OUT_TYPES = frozenset({'OUT', 'SALE', 'TRANSFER_OUT'})

# option -> (days back for startDate, days back for endDate)
_DATE_RANGE_OFFSETS = {
    'today': (0, 0),
    'yesterday': (1, 1),
    '7days': (7, 0),
    '30days': (30, 0),
    '90days': (90, 0),
}

_CHANGE_TYPE_LABELS = dict(CHANGE_TYPE_OPTIONS)


def change_type_label(change_type):
    """Human label for a change type, falling back to the raw value"""
    return _CHANGE_TYPE_LABELS.get(change_type, change_type)


def change_type_direction(change_type):
    if change_type in STOCK_IN_TYPES:
        return 'in'
    if change_type in STOCK_OUT_TYPES:
        return 'out'
    if change_type == 'ADJUSTMENT':
        return 'adjustment'
    if change_type == 'EXPIRED':
        return 'expired'
    return 'other'


def date_range_params(option, today=None):
    """Query params (startDate/endDate as YYYY-MM-DD) for a date-range option"""
    offsets = _DATE_RANGE_OFFSETS.get(option)
    if offsets is None:
        return {}
    today = today or timezone.now().date()
    start_back, end_back = offsets
    return {
        'startDate': (today - timedelta(days=start_back)).isoformat(),
        'endDate': (today - timedelta(days=end_back)).isoformat(),
    }


def matches_search(entry, search):
    if not search:
        return True
    needle = search.lower()
    haystacks = (entry.product_name, entry.sku, entry.reason, entry.adjustment_reference)
    return any(needle in str(value or '').lower() for value in haystacks)


def filter_inventory_logs(entries, search='', change_type='all'):
    """The subset the viewer shows and exports"""
    change_type = change_type or 'all'
    return [
        entry for entry in entries
        if matches_search(entry, search)
        and (change_type == 'all' or entry.change_type == change_type)
    ]


def summarize_inventory_logs(entries):
    return {
        'total': len(entries),
        'stock_in': sum(1 for entry in entries if entry.change_type in STOCK_IN_TYPES),
        'stock_out': sum(1 for entry in entries if entry.change_type in STOCK_OUT_TYPES),
        'adjustments': sum(1 for entry in entries if entry.change_type == 'ADJUSTMENT'),
    }
