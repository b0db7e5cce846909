"""
HTTP Client Module
Thin transport over a requests session bound to one base origin.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

from .exceptions import TransportError


class HttpClient:
    """Issues GET/POST requests with fixed timeout and browser-like headers"""

    def __init__(self, base_url: str, timeout: float = 10.0, headers: Optional[Dict[str, str]] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)
        self.session = requests.Session()

        # Set default headers for all requests
        if headers:
            self.session.headers.update(headers)

    def get(self, path: str, **overrides: Any) -> str:
        """Fetch a page and return its body as text"""
        return self._request('GET', path, **overrides)

    def post(self, path: str, body: Any = None, **overrides: Any) -> str:
        """Post a body (JSON for dicts and lists, raw otherwise) and return the response text"""
        if isinstance(body, (dict, list)):
            overrides.setdefault('json', body)
        elif body is not None:
            overrides.setdefault('data', body)
        return self._request('POST', path, **overrides)

    def build_url(self, path: str) -> str:
        """Resolve a path against the base origin; absolute URLs pass through"""
        if path.startswith(('http://', 'https://')):
            return path
        return urljoin(self.base_url + '/', path.lstrip('/'))

    def _request(self, method: str, path: str, **overrides: Any) -> str:
        url = self.build_url(path)

        # Merge per-call options over the defaults, headers key by key
        options: Dict[str, Any] = {'timeout': self.timeout}
        headers = overrides.pop('headers', None)
        options.update(overrides)
        if headers:
            options['headers'] = {**self.session.headers, **headers}

        self.logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, **options)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise TransportError(f"HTTP request failed: {e}", url=url, status_code=status) from e
        except requests.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", url=url) from e

        # raise_for_status lets 1xx and 3xx through
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"HTTP request failed: unexpected status {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        self.logger.debug(f"{method} {url} -> {response.status_code} ({len(response.text)} chars)")
        return response.text
