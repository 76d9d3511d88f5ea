"""
Management command to export inventory logs from the backend to a CSV file
"""
from django.core.management.base import BaseCommand, CommandError

from dashboard.core.errors import ApiError, classify_error
from dashboard.inventory.exporters import export_inventory_logs_csv, write_artifact
from dashboard.inventory.filters import CHANGE_TYPE_OPTIONS, DATE_RANGE_OPTIONS
from dashboard.inventory.views import fetch_server_export, load_inventory_logs


class Command(BaseCommand):
    help = "Exports inventory logs (optionally filtered) to inventory-logs-YYYY-MM-DD.csv"

    def add_arguments(self, parser):
        parser.add_argument(
            '--output-dir',
            type=str,
            default='.',
            help='Directory to write the CSV file into (default: current directory)',
        )
        parser.add_argument(
            '--search',
            type=str,
            default='',
            help='Only export logs whose product name, SKU, reason or reference matches',
        )
        parser.add_argument(
            '--change-type',
            type=str,
            default='all',
            choices=[value for value, _ in CHANGE_TYPE_OPTIONS],
            help='Only export one change type (default: all)',
        )
        parser.add_argument(
            '--date-range',
            type=str,
            default='all',
            choices=[value for value, _ in DATE_RANGE_OPTIONS],
            help='Restrict the backend query to a date range (default: all)',
        )
        parser.add_argument(
            '--server-side',
            action='store_true',
            help="Save the backend's own CSV export instead of rendering one locally",
        )

    def handle(self, *args, **options):
        filters = {
            'search': options['search'].strip(),
            'change_type': options['change_type'],
            'date_range': options['date_range'],
        }
        if options['server_side'] and filters['search']:
            raise CommandError("--search cannot be combined with --server-side")

        try:
            if options['server_side']:
                artifact = fetch_server_export(filters)
            else:
                entries, filtered = load_inventory_logs(filters)
                artifact = export_inventory_logs_csv(filtered)
        except ApiError as e:
            report = classify_error(e)
            self.stdout.write(self.style.ERROR(f"{report.title}: {report.message}"))
            for suggestion in report.suggestions:
                self.stdout.write(f"  - {suggestion}")
            raise CommandError(f"Could not load inventory logs ({report.kind.value}): {e.message}")

        path = write_artifact(artifact, options['output_dir'])
        if options['server_side']:
            self.stdout.write(self.style.SUCCESS(f"Saved the backend export to {path}"))
        else:
            self.stdout.write(self.style.SUCCESS(
                f"Exported {len(filtered)} of {len(entries)} inventory logs to {path}"
            ))
