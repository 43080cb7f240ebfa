from __future__ import annotations

"""ytvideos_node — **shared exception hierarchy** & HTTP‑error helper.

The metadata client maps every failed API response onto one of the
``YTAPIError`` subclasses; the node wraps per-item failures into
:class:`NodeOperationError` so callers can handle a run uniformly:

```python
from ytvideos_node import NodeOperationError, QuotaExceeded

try:
    node.execute(items, params)
except NodeOperationError as e:
    if isinstance(e.__cause__, QuotaExceeded):
        sleep_until_midnight()
    logger.warning("item %s failed: %s", e.item_index, e)
```"""

from typing import Final

__all__ = [
    "YTNodeError",
    "YTAPIError",
    "QuotaExceeded",
    "RateLimited",
    "NotAuthorized",
    "Forbidden",
    "InvalidRequest",
    "NodeOperationError",
    "InvalidParameterError",
    "UnknownOperationError",
    "ConfigurationError",
    "raise_for_status",
]

# ---------------------------------------------------------------------------
# Base & specialised exceptions
# ---------------------------------------------------------------------------


class YTNodeError(Exception):
    """Base for *all* ytvideos_node exceptions."""


class YTAPIError(YTNodeError):
    """The YouTube Data API answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None, reason: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


# ── Quota / rate‑limit ------------------------------------------------------
class QuotaExceeded(YTAPIError):
    """Daily project quota or per‑user quota exhausted (HTTP 403)."""


class RateLimited(YTAPIError):
    """Short‑term rate‑limit hit (HTTP 429 or 403 *userRateLimitExceeded*).

    ``retry_after`` is exposed for callers that schedule their own back‑off;
    the node itself never retries.
    """

    def __init__(self, message: str, retry_after: int | None = None, status_code: int | None = None,
                 reason: str | None = None):
        super().__init__(message, status_code, reason)
        self.retry_after = retry_after


# ── Auth / permissions ------------------------------------------------------
class NotAuthorized(YTAPIError):
    """401 – missing or invalid API key."""


class Forbidden(YTAPIError):
    """403 – key accepted but not allowed to access the resource."""


# ── Client mistakes ---------------------------------------------------------
class InvalidRequest(YTAPIError):
    """400 / 404 – malformed query parameters or unknown resource ID."""


# ── Node level --------------------------------------------------------------
class NodeOperationError(YTNodeError):
    """An item failed while the node was not allowed to continue.

    ``item_index`` is the position of the failing input item; the original
    exception is available as ``__cause__``.
    """

    def __init__(self, message: str, item_index: int | None = None):
        super().__init__(message)
        self.item_index = item_index


class InvalidParameterError(YTNodeError, ValueError):
    """A node parameter is missing, empty or of the wrong type."""


class UnknownOperationError(YTNodeError, ValueError):
    """The ``operation`` parameter names no supported operation."""


class ConfigurationError(YTNodeError):
    """Environment / settings are incomplete (e.g. no API key)."""


# ---------------------------------------------------------------------------
# Helper – map HTTP response → exception class
# ---------------------------------------------------------------------------


_QUOTA_REASONS: Final[set[str]] = {
    "quotaExceeded",
    "dailyLimitExceeded",
    "userRateLimitExceeded",
    "rateLimitExceeded",
}

_RATE_REASONS: Final[set[str]] = {
    "userRateLimitExceeded",
    "rateLimitExceeded",
}


def _reason(resp) -> str:  # noqa: ANN001
    """Return the *reason* field from Google’s error payload or ``"unknown"``."""
    try:
        return resp.json()["error"]["errors"][0]["reason"]
    except (ValueError, KeyError, IndexError, TypeError):
        return "unknown"


def _retry_after(resp) -> int:  # noqa: ANN001
    try:
        return int(resp.headers.get("Retry-After", "0") or 0)
    except ValueError:
        return 0


def raise_for_status(resp) -> None:  # noqa: ANN001
    """Raise the appropriate *ytvideos_node* exception for *resp*.

    Does **nothing** when the response code is < 400.
    """
    status = resp.status_code
    if status < 400:
        return

    reason = _reason(resp)
    message = f"YouTube API error {status} ({reason}): {resp.text}"

    if status == 401:
        raise NotAuthorized(message, status, reason)

    # 403 – distinguish quota vs. generic forbidden
    if status == 403:
        if reason in _QUOTA_REASONS:
            if reason in _RATE_REASONS:
                raise RateLimited(message, _retry_after(resp), status, reason)
            raise QuotaExceeded(message, status, reason)
        raise Forbidden(message, status, reason)

    if status == 429:
        raise RateLimited(message, _retry_after(resp), status, reason)

    if status in (400, 404):
        raise InvalidRequest(message, status, reason)

    raise YTAPIError(message, status, reason)
