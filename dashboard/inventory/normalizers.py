"""Normalization of raw inventory-log records for display and export"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

from .timestamps import decode_timestamp, format_instant, timestamp_from_wire

logger = logging.getLogger(__name__)

REASON_PLACEHOLDER = '—'
UNKNOWN_CHANGE_TYPE = 'UNKNOWN'


@dataclass(frozen=True)
class NormalizedAuditEntry:
    id: Any
    created_at: str
    id_is_synthetic: bool = False
    product: dict = field(default_factory=dict)
    product_batch: dict = field(default_factory=dict)
    sale: dict = field(default_factory=dict)
    purchase: dict = field(default_factory=dict)
    change_type: str = UNKNOWN_CHANGE_TYPE
    quantity_changed: Any = 0
    reason: str = REASON_PLACEHOLDER
    sale_id: Any = None
    purchase_id: Any = None
    adjustment_reference: Optional[str] = None

    @property
    def product_name(self):
        return self.product.get('name') or ''

    @property
    def sku(self):
        return self.product.get('sku') or ''

    @property
    def batch_label(self):
        return self.product_batch.get('batchNumber') or self.product_batch.get('id') or ''

    def to_dict(self):
        return {
            'id': self.id,
            'idIsSynthetic': self.id_is_synthetic,
            'product': self.product,
            'productBatch': self.product_batch,
            'changeType': self.change_type,
            'quantityChanged': self.quantity_changed,
            'reason': self.reason,
            'saleId': self.sale_id,
            'purchaseId': self.purchase_id,
            'adjustmentReference': self.adjustment_reference,
            'createdAt': self.created_at,
        }


def _mapping(value):
    return value if isinstance(value, dict) else {}


def synthetic_id(product, created_at_raw, change_type):
    """
    Identity for entries the backend sent without an id.

    Built from the entry's own content so it stays the same across reloads
    of the same data.
    """
    product_id = product.get('productId') or product.get('id') or '-'
    if isinstance(created_at_raw, (list, tuple)):
        created_at_raw = '-'.join(str(part) for part in created_at_raw)
    return f'auto:{product_id}:{created_at_raw if created_at_raw is not None else "-"}:{change_type}'


def normalize_inventory_log(raw, now=None, taken_ids=None):
    """Fill every field of a single raw record; ``taken_ids`` disambiguates synthetic ids"""
    raw = _mapping(raw)
    product = _mapping(raw.get('product'))
    product_batch = _mapping(raw.get('productBatch'))
    sale = _mapping(raw.get('sale'))
    purchase = _mapping(raw.get('purchase'))
    change_type = raw.get('changeType') or UNKNOWN_CHANGE_TYPE

    created_at = decode_timestamp(timestamp_from_wire(raw.get('createdAt')))
    if created_at is None:
        # Lossy: an undecodable creation time shows as "now".
        created_at = format_instant(now or datetime.now(timezone.utc))
        logger.warning(
            f"Inventory log {raw.get('id')!r}: could not decode createdAt "
            f"{raw.get('createdAt')!r}, using current time"
        )

    entry_id = raw.get('id')
    is_synthetic = entry_id is None or entry_id == ''
    if is_synthetic:
        entry_id = synthetic_id(product, raw.get('createdAt'), change_type)
        if taken_ids is not None:
            base, n = entry_id, 2
            while entry_id in taken_ids:
                entry_id = f'{base}#{n}'
                n += 1
            taken_ids.add(entry_id)

    return NormalizedAuditEntry(
        id=entry_id,
        id_is_synthetic=is_synthetic,
        product=product,
        product_batch=product_batch,
        sale=sale,
        purchase=purchase,
        change_type=change_type,
        quantity_changed=raw.get('quantityChanged') or 0,
        reason=raw.get('reason') or REASON_PLACEHOLDER,
        sale_id=sale.get('saleId') or raw.get('saleId') or None,
        purchase_id=purchase.get('purchaseId') or raw.get('purchaseId') or None,
        adjustment_reference=raw.get('adjustmentReference') or None,
        created_at=created_at,
    )


def normalize_inventory_logs(raw_logs, now=None):
    """
    Normalize one listing response.

    Anything that is not a list normalizes to an empty list. A single
    ``now`` is used for every timestamp substitution in the batch.
    """
    if not isinstance(raw_logs, (list, tuple)):
        return []
    now = now or datetime.now(timezone.utc)
    taken_ids = set()
    return [normalize_inventory_log(raw, now=now, taken_ids=taken_ids) for raw in raw_logs]
