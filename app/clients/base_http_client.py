# clients/base_http_client.py
import requests
import time
import re

from typing import Dict, Any, Optional
from urllib.parse import urljoin
from abc import ABC
from app.core.exceptions.exceptions import UpstreamError
from app.utils.log import app_logger

class BaseHTTPClient(ABC):
    """Base HTTP client with common functionalities like GET, retries, and error handling"""

    # upper bound on a server supplied Retry-After so a single page request can't stall
    MAX_RETRY_AFTER = 5.0

    def __init__(self,
                 base_url: str,
                 service_name: str,
                 timeout: int = 30, max_retries: int = 3,
                 retry_delay: float = 1.5,
                 accept: Optional[str] = 'application/json',
                 session: Optional[requests.Session] = None,
                 ):
        self.base_url = base_url.rstrip('/')
        self.service_name = service_name
        self.timeout = timeout
        self.accept = accept
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.session = session or requests.Session()

        # setup default headers
        self._setup_default_headers()

    USER_AGENT = "hacker-feed/0.1 (+https://github.com/HackerNews/API)"

    def _setup_default_headers(self):
        """setup default headers for the client"""
        self.session.headers.update({
            'User-Agent': self.USER_AGENT,
            'Accept': self.accept,
        })

    def _build_url(self, endpoint: str) -> str:
        """build full URL"""
        return urljoin(f"{self.base_url}/", endpoint.lstrip('/'))

    def _backoff(self, attempt: int) -> None:
        # exponential backoff
        time.sleep(self.retry_delay * (2 ** attempt))

    def _make_request(self, method: str, endpoint: str,
                     params: Optional[Dict] = None,
                     headers: Optional[Dict] = None) -> Any:
        """do HTTP request with retries and return the decoded JSON body"""
        url = self._build_url(endpoint)
        request_headers = headers or {}
        last_error = "no attempt made"
        last_status = None

        for attempt in range(self.max_retries + 1):
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    params=params,
                    headers=request_headers,
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                # sanitize message to remove memory addresses like <HTTPSConnection(...) at 0x...>
                sanitized = re.sub(r'0x[0-9a-fA-F]+', '<ptr>', str(e))
                exc_type = type(e).__name__
                app_logger.error("request.failed", method=method, url=url, attempt=attempt + 1, exc_type=exc_type, error=sanitized)
                last_error, last_status = f"{exc_type}: {sanitized}", None
                if attempt < self.max_retries:
                    self._backoff(attempt)
                continue

            # check rate limiting
            if response.status_code == 429:
                try:
                    retry_after = float(response.headers.get('Retry-After', self.retry_delay))
                except ValueError:
                    retry_after = self.retry_delay
                retry_after = min(retry_after, self.MAX_RETRY_AFTER)
                app_logger.warning("request.rate_limited", url=url, attempt=attempt + 1, wait=retry_after)
                last_error, last_status = "rate limited", 429
                if attempt < self.max_retries:
                    time.sleep(retry_after)
                continue

            # server side failures are worth another attempt, client errors are not
            if response.status_code >= 500:
                app_logger.warning("request.server_error", method=method, url=url, attempt=attempt + 1, status_code=response.status_code)
                last_error, last_status = f"HTTP {response.status_code}", response.status_code
                if attempt < self.max_retries:
                    self._backoff(attempt)
                continue

            if response.status_code >= 400:
                app_logger.debug("request.status", method=method, url=url, status_code=response.status_code)
                raise UpstreamError(self.service_name, f"HTTP {response.status_code} for {url}", response.status_code)

            try:
                return response.json()
            except ValueError:
                app_logger.error("request.parse_failed", url=url, length=len(response.text))
                raise UpstreamError(self.service_name, f"invalid JSON from {url}", response.status_code)

        raise UpstreamError(
            self.service_name,
            f"{method} {url} failed after {self.max_retries + 1} attempts ({last_error})",
            last_status,
        )

    def get(self, endpoint: str, params: Optional[Dict] = None,
            headers: Optional[Dict] = None) -> Any:
        """do GET request"""
        return self._make_request('GET', endpoint, params=params, headers=headers)

    def close(self):
        """close HTTP session"""
        self.session.close()
