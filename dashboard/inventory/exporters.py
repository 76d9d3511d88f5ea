"""CSV export of inventory logs"""
import csv
import io
import logging
import os
from dataclasses import dataclass

from django.http import HttpResponse
from django.utils import timezone

logger = logging.getLogger(__name__)

CSV_HEADERS = [
    'Product', 'SKU', 'Batch', 'ChangeType', 'QuantityChanged', 'Reason',
    'SaleId', 'PurchaseId', 'AdjustmentReference', 'CreatedAt',
]
CSV_CONTENT_TYPE = 'text/csv; charset=utf-8'
ROW_TERMINATOR = '\r\n'
LINE_SEPARATOR = '\n'


@dataclass(frozen=True)
class CsvArtifact:
    filename: str
    content: bytes
    content_type: str = CSV_CONTENT_TYPE

    @property
    def row_count(self):
        """Data rows, excluding the header"""
        if not self.content:
            return 0
        return len(list(csv.reader(io.StringIO(self.content.decode('utf-8'))))) - 1


def export_filename(today=None):
    today = today or timezone.now().date()
    return f'inventory-logs-{today.isoformat()}.csv'


def _cell(value):
    if value is None:
        return ''
    return str(value)


def entry_to_row(entry):
    return [
        _cell(entry.product.get('name')),
        _cell(entry.product.get('sku')),
        _cell(entry.batch_label or None),
        _cell(entry.change_type),
        _cell(entry.quantity_changed),
        _cell(entry.reason),
        _cell(entry.sale_id),
        _cell(entry.purchase_id),
        _cell(entry.adjustment_reference),
        _cell(entry.created_at),
    ]


def render_csv(entries):
    """
    CSV text for the given entries, header first.

    A field is quoted only when it holds a comma, a double quote, a CR or an
    LF; inner quotes are doubled. Rows are joined by a bare newline with no
    trailing newline.
    """
    rows = [CSV_HEADERS] + [entry_to_row(entry) for entry in entries]
    with io.StringIO() as buffer:
        # a CRLF terminator makes the writer quote bare CR as well as LF
        writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator=ROW_TERMINATOR)
        lines = []
        for row in rows:
            buffer.seek(0)
            buffer.truncate()
            writer.writerow(row)
            lines.append(buffer.getvalue()[:-len(ROW_TERMINATOR)])
    return LINE_SEPARATOR.join(lines)


def export_inventory_logs_csv(entries, today=None):
    """Build the downloadable artifact; pass only the filtered subset"""
    entries = list(entries)
    artifact = CsvArtifact(
        filename=export_filename(today),
        content=render_csv(entries).encode('utf-8'),
    )
    logger.info(f"Exported {len(entries)} inventory logs to {artifact.filename}")
    return artifact


def csv_download_response(artifact):
    """Hand the artifact to the browser as an attachment"""
    response = HttpResponse(artifact.content, content_type=artifact.content_type)
    response['Content-Disposition'] = f'attachment; filename="{artifact.filename}"'
    return response


def write_artifact(artifact, directory):
    """Save the artifact under ``directory``; returns the written path"""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, artifact.filename)
    with open(path, 'wb') as fh:
        fh.write(artifact.content)
    return path
