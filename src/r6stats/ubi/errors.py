from __future__ import annotations


class UbiError(RuntimeError):
    """Base exception for Ubisoft service failures."""


class UbiRequestError(UbiError):
    """HTTP/network/transport layer failures (timeouts, connection errors, non-2xx, etc.)."""


class UbiRateLimited(UbiRequestError):
    """Service throttled the request (HTTP 429)."""


class UbiResponseError(UbiError):
    """Service returned a well-formed error body (bad credentials, unknown profile id, ...)."""


class UbiProfileNotFound(UbiError):
    """A username did not resolve to exactly one profile."""
