from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from r6stats.core.dates import parse_iso_z

from .errors import UbiResponseError
from .http import BaseHttpClient

logger = logging.getLogger(__name__)

EXPIRY_MARGIN = timedelta(minutes=5)


def format_iso_z(dt: datetime) -> str:
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class Ticket:
    """Session ticket returned by the Ubisoft login endpoint."""

    token: str
    session_id: str
    expiration: datetime
    name: str
    profile_id: str
    email: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any], *, email: str | None = None) -> Ticket:
        token = payload.get("ticket")
        session_id = payload.get("sessionId")
        expiration = payload.get("expiration")
        if not isinstance(token, str) or not isinstance(session_id, str):
            raise UbiResponseError("Login response missing 'ticket' / 'sessionId'")
        if not isinstance(expiration, str):
            raise UbiResponseError("Login response missing 'expiration'")
        return cls(
            token=token,
            session_id=session_id,
            expiration=parse_iso_z(expiration),
            name=str(payload.get("nameOnPlatform") or ""),
            profile_id=str(payload.get("profileId") or ""),
            email=email,
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(tz=UTC)
        return now + EXPIRY_MARGIN > self.expiration


@dataclass
class UbiAuth:
    """Obtains and keeps a session ticket in memory."""

    http: BaseHttpClient
    email: str
    password: str
    base_url: str
    app_id: str
    ticket: Ticket | None = field(default=None, repr=False)

    def _credentials(self) -> str:
        raw = f"{self.email}:{self.password}".encode()
        return base64.b64encode(raw).decode("ascii")

    def login(self) -> Ticket:
        logger.debug("attempting login")
        payload = self.http.request_json(
            "POST",
            f"{self.base_url.rstrip('/')}/profiles/sessions",
            json={"rememberMe": "true"},
            headers={
                "Ubi-AppId": self.app_id,
                "Authorization": f"Basic {self._credentials()}",
                "Content-Type": "application/json",
            },
        )
        self.ticket = Ticket.from_payload(payload, email=self.email)
        logger.info("logged in as <%s>", self.ticket.name)
        return self.ticket

    def current_ticket(self) -> Ticket:
        reason: str | None = None
        if self.ticket is None:
            reason = "no ticket"
        elif self.ticket.email != self.email:
            reason = "email mismatch"
        elif self.ticket.is_expired():
            reason = "ticket expired"

        if reason is not None:
            logger.debug("login required, reason: %s", reason)
            return self.login()
        assert self.ticket is not None
        return self.ticket

    def headers(self, app_id: str) -> dict[str, str]:
        t = self.current_ticket()
        return {
            "Ubi-AppId": app_id,
            "Ubi-SessionId": t.session_id,
            "Expiration": format_iso_z(t.expiration),
            "Authorization": f"ubi_v1 t={t.token}",
        }
