from __future__ import annotations

from dataclasses import dataclass
import http.client
import json
import logging
import time
import urllib.request

from jose import jwt
from jose.exceptions import JWTError

from gamehub.core.settings import settings
from gamehub.models.provider import Provider
from gamehub.services.errors import VerifierUnavailable

logger = logging.getLogger(__name__)


class IdTokenError(Exception):
    """A third-party ID token was rejected."""


@dataclass(frozen=True)
class VerifiedIdentity:
    provider: Provider
    external_id: str
    screen_name_hint: str | None


_JWKS_CACHE: dict | None = None
_JWKS_CACHE_UNTIL: float = 0


def _get_jwks() -> dict:
    global _JWKS_CACHE, _JWKS_CACHE_UNTIL

    if _JWKS_CACHE and time.time() < _JWKS_CACHE_UNTIL:
        return _JWKS_CACHE

    with urllib.request.urlopen(settings.GOOGLE_JWKS_URL, timeout=5) as resp:
        data = json.loads(resp.read().decode("utf-8"))

    _JWKS_CACHE = data
    _JWKS_CACHE_UNTIL = time.time() + 3600
    return data


def verify_google_id_token(id_token: str) -> VerifiedIdentity:
    """Validate a Google ID token (RS256 against Google's JWKS) and return its subject."""
    if not settings.GOOGLE_CLIENT_ID:
        logger.error("GOOGLE_CLIENT_ID is not configured")
        raise VerifierUnavailable("GOOGLE_CLIENT_ID not configured")

    try:
        unverified_header = jwt.get_unverified_header(id_token)
        kid = unverified_header.get("kid")
        try:
            jwks = _get_jwks()
        except (OSError, ValueError, http.client.HTTPException) as exc:
            logger.warning("fetching Google JWKS failed", exc_info=True)
            raise IdTokenError("Unable to fetch signing keys") from exc
        key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
        if not key:
            raise IdTokenError("Unable to find signing key")

        payload = jwt.decode(
            id_token,
            key,
            algorithms=["RS256"],
            audience=settings.GOOGLE_CLIENT_ID,
            # Google uses two issuer spellings; checked below.
            options={"verify_iss": False, "verify_at_hash": False},
        )
    except JWTError as exc:
        raise IdTokenError("Invalid token") from exc

    if payload.get("iss") not in settings.GOOGLE_ISSUERS:
        raise IdTokenError("Token issuer is not Google")

    sub = payload.get("sub")
    if not sub:
        raise IdTokenError("Token missing sub")

    return VerifiedIdentity(
        provider=Provider.GOOGLE,
        external_id=str(sub),
        screen_name_hint=payload.get("name") or payload.get("given_name"),
    )
