import threading
import time
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from utils.logging.logging_manager import LogManager


class RateLimitedHTTPClient:
    """JSON HTTP client with a request-per-second cap shared by all threads, retries on
    throttling and server errors, and a single pooled session.
    """

    def __init__(
        self,
        max_rps: float = 2.0,
        max_retries: int = 3,
        headers: dict[str, str] | None = None,
        timeout: int = 30,
    ):
        """Initialize HTTP client

        Args:
            max_rps: Maximum requests per second across all threads
            max_retries: Maximum number of retries for failed requests
            headers: Headers sent with every request
            timeout: Request timeout in seconds
        """
        if max_rps <= 0:
            raise ValueError("max_rps must be > 0")
        self.min_interval = 1.0 / max_rps
        self.max_retries = max_retries
        self.timeout = timeout
        self.logger = LogManager.get_instance().get_logger("RateLimitedHTTPClient")

        self._lock = threading.Lock()
        self._next_slot = 0.0
        self.session = self._create_session(headers or {})

        # Statistics
        self.requests_made = 0
        self.failed_requests = 0

    def _create_session(self, headers: dict[str, str]) -> requests.Session:
        session = requests.Session()
        retry_strategy = Retry(
            total=self.max_retries,
            status_forcelist=[429, 500, 502, 503, 504],
            backoff_factor=1,
            allowed_methods=["GET"],
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        session.headers.update({"Accept": "application/json", **headers})
        return session

    def _apply_rate_limit(self) -> None:
        """Reserve the next free request slot and sleep until it arrives."""
        with self._lock:
            now = time.monotonic()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self.min_interval
        delay = slot - now
        if delay > 0:
            self.logger.debug(f"Rate limiting: sleeping for {delay:.2f} seconds")
            time.sleep(delay)

    def get_json(self, url: str, params: dict[str, Any] | None = None) -> Any | None:
        """GET a JSON document.

        Returns:
            The decoded body, or None when the resource does not exist (404).

        Raises:
            requests.RequestException: If the request fails after all retries.
        """
        self._apply_rate_limit()
        self.requests_made += 1
        self.logger.debug(f"GET {url} params={params}")
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            if response.status_code == 404:
                self.logger.debug(f"Resource not found: {url}")
                return None
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            self.failed_requests += 1
            self.logger.error(f"Failed GET request to {url}: {e}")
            raise

    def close(self) -> None:
        self.session.close()
