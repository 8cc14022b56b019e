"""Password check and encrypted session tokens for the dashboard login."""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from typing import Callable

from cryptography.fernet import Fernet, InvalidToken

_SESSION_MARKER = b"ops-dashboard-session"


class SessionTokenService:
    """Issue and verify session cookies using a Fernet key derived from a secret.

    Fernet tokens embed their creation time, so expiry is enforced on verify
    with ``max_age_seconds``.
    """

    def __init__(
        self,
        *,
        password: str,
        secret: str | None = None,
        max_age_seconds: int = 60 * 60 * 24 * 7,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not password:
            raise ValueError("Dashboard password must be provided.")
        key_material = secret or password
        digest = hashlib.sha256(key_material.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))
        self._password = password.encode("utf-8")
        self._max_age = max_age_seconds
        self._clock = clock

    @property
    def max_age_seconds(self) -> int:
        return self._max_age

    def check_password(self, candidate: str) -> bool:
        return hmac.compare_digest(candidate.encode("utf-8"), self._password)

    def issue(self) -> str:
        """Return a new session token."""
        token = self._fernet.encrypt_at_time(_SESSION_MARKER, int(self._clock()))
        return token.decode("utf-8")

    def verify(self, token: str | None) -> bool:
        """True when ``token`` was issued by this service and has not expired."""
        if not token:
            return False
        try:
            payload = self._fernet.decrypt_at_time(
                token.encode("utf-8"), ttl=self._max_age, current_time=int(self._clock())
            )
        except InvalidToken:
            return False
        return hmac.compare_digest(payload, _SESSION_MARKER)


__all__ = ["SessionTokenService"]
