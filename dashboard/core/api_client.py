"""
Thin client for the pharmacy-inventory REST backend.

Failures surface as ApiError so that callers can hand them straight to
classify_error. There is no retry and no cancellation.
"""
import logging

import requests
from django.conf import settings

from .errors import NETWORK_FAILURE_MESSAGE, ApiError

logger = logging.getLogger(__name__)


class ApiClient:
    """HTTP access to the backend with the configured bearer token attached"""

    def __init__(self, base_url, token=None, timeout=30, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        if token:
            self.session.headers.update({'Authorization': f'Bearer {token}'})

    @classmethod
    def from_settings(cls):
        return cls(
            settings.PHARMA_API_URL,
            token=settings.PHARMA_API_TOKEN,
            timeout=settings.PHARMA_API_TIMEOUT,
        )

    def _send(self, method, path, params=None, headers=None, **kwargs):
        url = f'{self.base_url}{path}'
        logger.debug(f"{method} {url} params={params}")
        try:
            response = self.session.request(
                method, url, params=params, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.Timeout as e:
            logger.warning(f"Request to {url} timed out: {e}")
            raise ApiError(f'Request timeout after {self.timeout}s') from e
        except requests.ConnectionError as e:
            logger.warning(f"Could not reach {url}: {e}")
            raise ApiError(NETWORK_FAILURE_MESSAGE) from e

        if not response.ok:
            message = self._error_message(response)
            logger.warning(f"{method} {url} failed: {message}")
            raise ApiError(message, response=response)
        return response

    @staticmethod
    def _error_message(response):
        """Prefer the backend's own message/error field over the status line"""
        message = f'HTTP {response.status_code}: {response.reason}'
        try:
            data = response.json()
        except ValueError:
            return message
        if isinstance(data, dict):
            return data.get('message') or data.get('error') or message
        return message

    def request(self, method, path, params=None, **kwargs):
        response = self._send(method, path, params=params, **kwargs)
        if response.status_code == 204:
            return None
        content_type = response.headers.get('content-type', '')
        if 'application/json' in content_type:
            return response.json()
        return response.text

    def request_bytes(self, method, path, params=None, accept=None):
        headers = {'Accept': accept} if accept else None
        response = self._send(method, path, params=params, headers=headers)
        return response.content

    def get(self, path, params=None):
        return self.request('GET', path, params=params)
