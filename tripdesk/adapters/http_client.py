"""Shared HTTP transport for the travel API adapters.

Wraps ``requests.Session`` so every adapter uses the same timeout policy,
retry loop, and ``X-API-Key`` header.

Call context:
    - Constructed by ``tripdesk.adapters.records_rest.RecordsRestAdapter``.
    - Used only inside adapter methods; use cases talk to ports.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from requests import exceptions as req_exc

from tripdesk.adapters.api_errors import ApiError, ApiTimeoutError


@dataclass
class HttpConfig:
    """Timeout and retry settings for adapter calls.

    Attributes:
        request_timeout_s: Timeout in seconds for a single attempt.
        retries: Number of extra attempts after the first timeout.
    """

    request_timeout_s: int = 10
    retries: int = 2


class RetryingSession:
    """requests wrapper that retries GET/DELETE on timeouts only.

    Non-2xx responses are returned untouched; status mapping belongs to the
    calling adapter.
    """

    def __init__(self, api_key: Optional[str], cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.api_key = api_key
        self.cfg = cfg

    def _headers(self, accept: str = "application/json") -> Dict[str, str]:
        headers = {"Accept": accept}
        if self.api_key:
            headers["X-API-Key"] = self.api_key
        return headers

    def _send(
        self,
        method: str,
        send: Callable[..., requests.Response],
        url: str,
        **kwargs: Any,
    ) -> requests.Response:
        context = f"{method} {url}"
        last_err: Optional[ApiTimeoutError] = None
        for _ in range(max(0, self.cfg.retries) + 1):
            try:
                return send(url, **kwargs)
            except (req_exc.Timeout, req_exc.ConnectionError):
                last_err = ApiTimeoutError(f"Timeout contacting {url}", context=context)
            except req_exc.RequestException as exc:
                raise ApiError(str(exc), context=context) from exc
        raise last_err

    def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> requests.Response:
        """Send a GET request.

        Raises:
            ApiTimeoutError: If every attempt times out or cannot connect.
            ApiError: For other transport failures (no retry).
        """
        return self._send(
            "GET",
            self.session.get,
            url,
            params=params,
            headers=self._headers(),
            timeout=timeout or self.cfg.request_timeout_s,
        )

    def delete(self, url: str, *, timeout: Optional[int] = None) -> requests.Response:
        """Send a DELETE request with the same retry policy as ``get``."""
        return self._send(
            "DELETE",
            self.session.delete,
            url,
            headers=self._headers(),
            timeout=timeout or self.cfg.request_timeout_s,
        )


__all__ = ["HttpConfig", "RetryingSession"]
