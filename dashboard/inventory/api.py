"""Endpoint wrappers for the backend's inventory-log service"""
from dashboard.core.api_client import ApiClient

BASE_PATH = '/api/v1/inventoryLogs'


class InventoryLogsApi:
    def __init__(self, client):
        self.client = client

    def get_all(self, params=None):
        return self.client.get(f'{BASE_PATH}/', params=params or None)

    def export(self, params=None):
        """Server-side CSV export, as raw bytes"""
        return self.client.request_bytes(
            'GET', f'{BASE_PATH}/export', params=params or None,
            accept='text/csv, application/octet-stream',
        )


def get_inventory_logs_api():
    return InventoryLogsApi(ApiClient.from_settings())
