# src/pricefeed/shared/http.py
"""
HTTP Transport - GET with Timeout and Bounded Retry

This module wraps requests.get for the price providers. Each request carries
a fixed timeout and is retried a fixed number of times with a fixed delay on
connection errors, timeouts and 5xx responses. 4xx responses are returned
immediately; turning a response into a domain error is the provider's job.

Files that USE this module:
- pricefeed.adapters.providers.base (every provider owns one HttpClient)
- tests.* (tests patch pricefeed.shared.http.requests.get)

Files that this module USES:
- None (requests only)
"""
import logging
import time
from typing import Any, Dict, Optional

import requests

log = logging.getLogger(__name__)


class HttpClient:
    """
    Minimal GET client bound to one base URL.

    Query parameters and headers given at construction (e.g. API keys) are
    sent with every request.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10,
        retries: int = 3,
        retry_delay: float = 0.1,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize HTTP client.

        Args:
            base_url: Scheme and host (plus optional path prefix) of the API
            timeout: Per-attempt timeout in seconds
            retries: Total number of attempts (>= 1)
            retry_delay: Seconds to sleep between attempts
            headers: Headers sent with every request
            params: Query parameters sent with every request
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = max(1, int(retries))
        self.retry_delay = retry_delay
        self.headers = dict(headers or {})
        self.params = dict(params or {})

    def url_for(self, path: str) -> str:
        if not path:
            return self.base_url
        return f"{self.base_url}/{path.lstrip('/')}"

    def get(self, path: str = "", params: Optional[Dict[str, Any]] = None) -> requests.Response:
        """
        Perform a GET request, retrying transient failures.

        Args:
            path: Path appended to the base URL
            params: Extra query parameters for this request

        Returns:
            The last response received (may be a non-2xx response)

        Raises:
            requests.exceptions.RequestException: If the last attempt failed
                without a response (timeout, connection error, ...)
        """
        url = self.url_for(path)
        query = {**self.params, **(params or {})}

        # Every attempt but the last may fail over to the next one
        for attempt in range(1, self.retries):
            try:
                resp = self._send(url, query)
            except requests.exceptions.RequestException as e:
                log.warning(
                    "GET %s failed (attempt %d/%d): %s",
                    self.base_url, attempt, self.retries, e.__class__.__name__,
                )
            else:
                if resp.status_code < 500:
                    return resp
                log.warning(
                    "GET %s returned %d (attempt %d/%d)",
                    self.base_url, resp.status_code, attempt, self.retries,
                )

            if self.retry_delay > 0:
                time.sleep(self.retry_delay)

        return self._send(url, query)

    def _send(self, url: str, query: Dict[str, Any]) -> requests.Response:
        return requests.get(
            url,
            params=query or None,
            headers=self.headers or None,
            timeout=self.timeout,
        )
