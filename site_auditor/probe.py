"""
URL reachability probe used by the broken-links check.

Any callable taking a URL and returning True when it is reachable can stand in
for HttpProbe; tests inject plain functions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

import httpx

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)

Probe = Callable[[str], bool]

# Servers that refuse HEAD but may well serve GET
HEAD_UNSUPPORTED = {405, 501}


class HttpProbe:
    """
    Check URLs with httpx.

    A URL is reachable when the final response (after redirects) is 2xx.
    Timeouts and transport errors count as unreachable.
    """

    def __init__(self, timeout: float = 10.0, user_agent: str | None = None) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._client: httpx.Client | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "HttpProbe":
        settings = config.get("broken_links", {})
        return cls(
            timeout=float(settings.get("timeout", 10.0)),
            user_agent=settings.get("user_agent"),
        )

    @property
    def client(self) -> httpx.Client:
        """Lazy-load the HTTP client."""
        if self._client is None:
            headers = {"User-Agent": self.user_agent} if self.user_agent else None
            self._client = httpx.Client(
                timeout=self.timeout,
                follow_redirects=True,
                headers=headers,
            )
        return self._client

    def __call__(self, url: str) -> bool:
        try:
            response = self.client.head(url)
            if response.status_code in HEAD_UNSUPPORTED:
                response = self.client.get(url)
        except httpx.HTTPError as e:
            logger.debug("Probe failed for %s: %s", url, e)
            return False
        except httpx.InvalidURL as e:
            logger.debug("Invalid URL %s: %s", url, e)
            return False
        if not response.is_success:
            logger.debug("Probe for %s returned HTTP %s", url, response.status_code)
        return response.is_success

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HttpProbe":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
