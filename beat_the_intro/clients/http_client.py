from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

import requests

from ..config import REQUEST, RETRY
from ..utils.utilities import (
    RateLimiter,
    network_failures_count,
    raise_on_new_network_failure,
    with_retries,
)


class TokenRejectedError(RuntimeError):
    """The bearer token was refused (HTTP 401)."""


# Status short-circuits, resolved outside the retry loop.
_NOT_FOUND = object()
_UNAUTHORIZED = object()


@dataclass
class BearerJSONClient:
    """
    GET + JSON against a bearer-token REST API.

    Requests are rate limited and retried with backoff; 404 reads as "missing" (None) and 401
    raises `auth_error` immediately instead of being retried.
    """

    session: requests.Session
    token: str
    ratelimiter: RateLimiter
    context_prefix: str = ""
    auth_error: type[RuntimeError] = TokenRejectedError
    stats: dict[str, Any] = field(default_factory=dict)

    def _request(self, url: str, params: dict[str, Any] | None) -> Any:
        self.ratelimiter.wait()
        self.stats["http_get"] = int(self.stats.get("http_get", 0) or 0) + 1
        r = self.session.get(
            url,
            params=params,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=REQUEST.timeout_s,
        )
        if r.status_code == 404:
            return _NOT_FOUND
        if r.status_code == 401:
            return _UNAUTHORIZED
        r.raise_for_status()
        return r.json()

    def get_json(
        self, url: str, *, params: dict[str, Any] | None = None, context: str
    ) -> dict[str, Any] | None:
        ctx = f"{self.context_prefix}: {context}" if self.context_prefix else context
        before_net = network_failures_count(self.stats)
        data = with_retries(
            lambda: self._request(url, params),
            retries=RETRY.retries,
            base_sleep_s=RETRY.base_sleep_s,
            on_fail_return=None,
            context=ctx,
            retry_stats=self.stats,
        )
        if data is _UNAUTHORIZED:
            raise self.auth_error(f"Access token rejected ({ctx}). Log in again to get a new token.")
        if data is None:
            raise_on_new_network_failure(self.stats, before=before_net, context=ctx)
        if data is _NOT_FOUND or not isinstance(data, dict):
            return None
        return data

    def iter_pages(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        context: str,
        max_pages: int,
    ) -> Iterator[dict[str, Any]]:
        """Yield result pages, following the `next` URL (which already carries the query)."""
        next_url: str | None = url
        page = 0
        while next_url and page < max_pages:
            data = self.get_json(next_url, params=params, context=f"{context} page={page + 1}")
            if data is None:
                return
            page += 1
            yield data
            next_url = str(data.get("next") or "").strip() or None
            params = None
