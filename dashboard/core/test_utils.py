"""
Test utilities and factories for creating test data
"""
from unittest import mock

import requests


class TestDataFactory:
    """Factory class for raw backend payloads and HTTP responses"""
    __test__ = False

    @staticmethod
    def raw_log(log_id=1, name='Paracetamol 500mg', sku='PARA-500', batch_number='B-001',
                change_type='SALE', quantity=-2, reason='Counter sale', created_at=None, **extra):
        """Create a raw inventory log as the backend sends it"""
        log = {
            'id': log_id,
            'product': {'productId': 10, 'name': name, 'sku': sku},
            'productBatch': {'id': 3, 'batchNumber': batch_number},
            'changeType': change_type,
            'quantityChanged': quantity,
            'reason': reason,
            'createdAt': created_at if created_at is not None else [2024, 3, 5, 14, 30, 0, 500000000],
        }
        log.update(extra)
        return log

    @staticmethod
    def raw_logs(count=3, **kwargs):
        """Create ``count`` raw logs with consecutive ids"""
        return [TestDataFactory.raw_log(log_id=index + 1, **kwargs) for index in range(count)]

    @staticmethod
    def http_response(status_code=200, json_data=None, reason='OK', content_type='application/json',
                      content=b''):
        """Create a requests.Response-like mock"""
        response = mock.Mock(spec=requests.Response)
        response.status_code = status_code
        response.reason = reason
        response.ok = status_code < 400
        response.headers = {'content-type': content_type}
        response.content = content
        if json_data is None:
            response.json.side_effect = ValueError('No JSON object could be decoded')
        else:
            response.json.return_value = json_data
        return response


class FakeInventoryLogsApi:
    """Stand-in for InventoryLogsApi that returns canned data or raises"""

    def __init__(self, logs=None, error=None, export_content=b''):
        self.logs = logs if logs is not None else []
        self.error = error
        self.export_content = export_content
        self.calls = []

    def get_all(self, params=None):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.logs

    def export(self, params=None):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.export_content
