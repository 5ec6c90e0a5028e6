"""
Thin HTTP client for the public REST APIs exercised by the API suite.

Wraps a ``requests.Session`` so every call is logged with its method,
URL, status and elapsed time, and a response slower than the configured
budget produces a warning rather than a failure. Transport errors from
``requests`` propagate unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from typing import Any
from urllib.parse import urljoin

import requests

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ApiClient:
    """
    Session-backed JSON client bound to one base URL.

    Attributes:
        base_url: Root URL every relative path is joined to.
        timeout: Per-request timeout in seconds.
        max_response_ms: Soft latency budget; slower responses log a warning.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_response_ms: int | None = None,
        headers: dict[str, str] | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self.max_response_ms = max_response_ms
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        if headers:
            self.session.headers.update(headers)

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url.rstrip("/") + "/", path.lstrip("/"))

    def request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        """
        Send a request and log its outcome.

        Args:
            method: HTTP verb.
            path: Path relative to ``base_url``.
            **kwargs: Passed through to ``requests.Session.request``.

        Returns:
            The response, whatever its status code.
        """
        url = self.url_for(path)
        kwargs.setdefault("timeout", self.timeout)
        response = self.session.request(method, url, **kwargs)

        elapsed_ms = response.elapsed.total_seconds() * 1000
        logger.info("%s %s -> %s (%.0fms)", method, url, response.status_code, elapsed_ms)
        if self.max_response_ms is not None and elapsed_ms > self.max_response_ms:
            logger.warning(
                "%s %s took %.0fms (budget %sms)", method, url, elapsed_ms, self.max_response_ms
            )
        return response

    def get(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("PUT", path, **kwargs)

    def patch(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("PATCH", path, **kwargs)

    def delete(self, path: str, **kwargs: Any) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def gather(self, calls: Iterable[Callable[[], requests.Response]], max_workers: int = 5) -> list[requests.Response]:
        """
        Run independent calls concurrently and return results in input order.

        Every call runs to completion; the first exception raised by any
        of them is re-raised once all have finished.

        The calls share this client's ``requests.Session``, which requests
        does not document as thread-safe. Keep batches to independent reads
        that leave session state untouched; use one client per thread for
        anything else.
        """
        calls = list(calls)
        if not calls:
            return []
        with ThreadPoolExecutor(max_workers=min(max_workers, len(calls))) as executor:
            futures = [executor.submit(call) for call in calls]
        return [future.result() for future in futures]

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
