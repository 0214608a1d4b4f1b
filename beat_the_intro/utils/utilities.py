from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Any, Callable

import pandas as pd

from ..config import RETRY

# ----------------------------
# CSV Helpers
# ----------------------------


def read_csv(path: str | Path) -> pd.DataFrame:
    """Read CSV preserving strings and avoiding problematic type inference."""
    return pd.read_csv(path, dtype=str, keep_default_na=False)


def write_csv(df: pd.DataFrame, path: str | Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)


def ensure_columns(df: pd.DataFrame, cols_with_defaults: dict[str, Any]) -> pd.DataFrame:
    """Create columns if they don't exist, with a default value."""
    for col, default in cols_with_defaults.items():
        if col not in df.columns:
            df[col] = default
    return df


def parse_float_cell(value: object, default: float = 0.0) -> float:
    s = str(value if value is not None else "").strip()
    if not s:
        return default
    try:
        return float(s)
    except ValueError:
        return default


def parse_bool_cell(value: object) -> bool:
    return str(value if value is not None else "").strip().casefold() in {"true", "1", "yes"}


# ----------------------------
# Rate limiting + retries
# ----------------------------


class RateLimiter:
    """
    Simple rate limiter: enforces minimum interval between requests.
    """

    def __init__(self, min_interval_s: float = 1.0):
        self.min_interval_s = float(min_interval_s)
        self._last = 0.0

    def wait(self) -> None:
        now = time.monotonic()
        delta = now - self._last
        if delta < self.min_interval_s:
            time.sleep(self.min_interval_s - delta)
        self._last = time.monotonic()


def _classify_request_error(exc: BaseException) -> tuple[bool, bool, int | None, float | None]:
    """Return (is_http, is_network, status, retry_after_s) for a failed request."""
    import requests  # local import to avoid hard dependency at import time

    if isinstance(exc, requests.exceptions.HTTPError):
        resp = getattr(exc, "response", None)
        status = getattr(resp, "status_code", None)
        retry_after_s: float | None = None
        if status == 429:
            headers = getattr(resp, "headers", {}) or {}
            ra = str(headers.get("Retry-After", "") or "").strip()
            try:
                retry_after_s = float(ra) if ra else None
            except ValueError:
                retry_after_s = None
            if retry_after_s is None:
                retry_after_s = RETRY.http_429_default_retry_after_s
        return True, False, status, retry_after_s
    net_types = (
        requests.exceptions.ConnectionError,
        requests.exceptions.Timeout,
        requests.exceptions.SSLError,
    )
    return False, isinstance(exc, net_types), None, None


def _bump(stats: dict[str, Any] | None, key: str, by: int = 1) -> None:
    if stats is not None:
        stats[key] = int(stats.get(key, 0) or 0) + by


def with_retries(
    fn: Callable[[], Any],
    *,
    retries: int = RETRY.retries,
    base_sleep_s: float = RETRY.base_sleep_s,
    jitter_s: float = RETRY.jitter_s,
    retry_on: tuple[type, ...] = (Exception,),
    on_fail_return: Any = None,
    context: str | None = None,
    retry_stats: dict[str, Any] | None = None,
) -> Any:
    """
    Execute fn with retries and exponential backoff.

    HTTP 429 honors `Retry-After`. After the last attempt the failure is logged (tagged as
    [NETWORK], [HTTP] or [REQUEST]) and `on_fail_return` is returned.
    """
    for attempt in range(retries):
        try:
            return fn()
        except retry_on as e:
            is_http, is_network, status, retry_after_s = _classify_request_error(e)
            is_429 = status == 429
            if is_429:
                _bump(retry_stats, "http_429")
            if is_network:
                _bump(retry_stats, "network_errors")
            if is_http:
                _bump(retry_stats, "http_errors")

            if attempt == retries - 1:
                if context:
                    tag = "NETWORK" if is_network else ("HTTP" if is_http else "REQUEST")
                    logging.error(f"[{tag}] {context}: {type(e).__name__}: {e}")
                if is_network:
                    _bump(retry_stats, "network_failures")
                if is_http:
                    _bump(retry_stats, "http_failures")
                return on_fail_return

            sleep = base_sleep_s * (2**attempt) + random.uniform(0, jitter_s)
            if retry_after_s is not None and retry_after_s > 0:
                sleep = max(sleep, retry_after_s)
            _bump(retry_stats, "retry_attempts")
            if is_429:
                _bump(retry_stats, "http_429_retries")
            time.sleep(sleep)
    return on_fail_return


def network_failures_count(stats: dict[str, Any] | None) -> int:
    if not stats:
        return 0
    try:
        return int(stats.get("network_failures", 0) or 0)
    except (TypeError, ValueError):
        return 0


def raise_on_new_network_failure(
    stats: dict[str, Any] | None, *, before: int, context: str
) -> None:
    """
    Raise a clear error when a network failure happened during a provider request.

    We prefer failing fast rather than producing partial results that look like "not found".
    """
    after = network_failures_count(stats)
    if after > before:
        raise RuntimeError(
            f"Network unavailable while calling {context}. Enable internet access and rerun."
        )
