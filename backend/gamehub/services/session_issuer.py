from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import jwt
from jose.exceptions import JWTError

from gamehub.models.player import Player
from gamehub.services.errors import InvalidSessionToken, SigningUnavailable

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SessionCredential:
    """A freshly signed session token. Never stored server-side."""

    subject: uuid.UUID
    issued_at: datetime
    expires_at: datetime
    token: str


@dataclass(frozen=True)
class SessionClaims:
    subject: uuid.UUID
    issued_at: datetime
    expires_at: datetime


class SessionIssuer:
    """Signs HS256 session tokens whose lifetime is exactly `ttl`."""

    def __init__(
        self,
        secret: str | None,
        ttl: timedelta,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if ttl <= timedelta(0) or ttl % timedelta(seconds=1):
            raise ValueError("session ttl must be a positive whole number of seconds")
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, player: Player) -> SessionCredential:
        if not self._secret:
            logger.error("session secret is not configured")
            raise SigningUnavailable("session secret is not configured")

        # JWT timestamps are whole seconds.
        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + self._ttl
        claims = {
            "sub": str(player.id),
            "iat": int(issued_at.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        try:
            token = jwt.encode(claims, self._secret, algorithm=ALGORITHM)
        except JWTError as exc:
            logger.error("session token signing failed", exc_info=True)
            raise SigningUnavailable("session token signing failed") from exc

        return SessionCredential(
            subject=player.id,
            issued_at=issued_at,
            expires_at=expires_at,
            token=token,
        )

    def verify(self, token: str) -> SessionClaims:
        if not self._secret:
            raise SigningUnavailable("session secret is not configured")

        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
            subject = uuid.UUID(payload["sub"])
            issued_at = datetime.fromtimestamp(payload["iat"], tz=timezone.utc)
            expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        except JWTError as exc:
            raise InvalidSessionToken(str(exc)) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidSessionToken("malformed session token claims") from exc

        return SessionClaims(subject=subject, issued_at=issued_at, expires_at=expires_at)
