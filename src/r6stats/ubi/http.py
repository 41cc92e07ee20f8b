from __future__ import annotations

import json as jsonlib
from dataclasses import dataclass, field
from typing import Any, Mapping

import httpx

from .errors import UbiRateLimited, UbiRequestError, UbiResponseError

Json = dict[str, Any]


@dataclass
class BaseHttpClient:
    """
    Thin httpx wrapper shared by the auth and stats clients.

    - Uses a single underlying httpx.Client for connection pooling.
    - Maps transport failures and non-2xx responses to UbiRequestError.
    - Returns raw bytes so the stats decoder sees the body untouched.
    """

    timeout_s: float = 30.0
    connect_timeout_s: float = 10.0
    headers: Mapping[str, str] = field(default_factory=dict)

    transport: httpx.BaseTransport | None = None

    def __post_init__(self) -> None:
        self._client = httpx.Client(
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            headers=dict(self.headers),
            transport=self.transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> BaseHttpClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def request_bytes(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        """
        Perform an HTTP request and return the response body.
        Raises UbiRequestError (including UbiRateLimited) on transport issues / non-2xx,
        and UbiResponseError when the service explains the failure in its body.
        """
        try:
            resp = self._client.request(
                method=method,
                url=url,
                params=params,
                json=json,
                headers=headers,
            )
        except (httpx.TimeoutException, httpx.NetworkError) as e:
            raise UbiRequestError(str(e)) from e

        if resp.status_code == 429:
            raise UbiRateLimited("Service rate limited the request (HTTP 429).")

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(resp)
            if message is not None:
                raise UbiResponseError(f"HTTP {resp.status_code}: {message}") from e
            raise UbiRequestError(
                f"HTTP {resp.status_code} for {method} {resp.request.url}"
            ) from e

        return resp.content

    def request_json(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Json:
        body = self.request_bytes(method, url, params=params, json=json, headers=headers)
        try:
            data = jsonlib.loads(body)
        except ValueError as e:
            raise UbiRequestError("Response was not valid JSON.") from e

        if not isinstance(data, dict):
            raise UbiRequestError(f"Expected JSON object, got {type(data)}")

        return data


def _error_message(resp: httpx.Response) -> str | None:
    # {"errorCode": 1, "message": "...", "error": "..."}
    try:
        data = resp.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    message = data.get("message") or data.get("error")
    if not isinstance(message, str) or not message:
        return None
    code = data.get("errorCode")
    return f"{message} (errorCode={code})" if code is not None else message
