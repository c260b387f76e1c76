from __future__ import annotations

import uuid

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session, sessionmaker

from gamehub.core.settings import settings
from gamehub.db.session import SessionLocal
from gamehub.models.player import Player
from gamehub.services.errors import InvalidSessionToken, PlayerNotFound, SigningUnavailable
from gamehub.services.session_issuer import SessionIssuer
from gamehub.services.sign_in import SignInService


def get_session_factory() -> sessionmaker[Session]:
    return SessionLocal


def get_session_issuer() -> SessionIssuer:
    return SessionIssuer(settings.SESSION_SECRET, settings.SESSION_TTL)


def get_sign_in_service(
    session_factory: sessionmaker[Session] = Depends(get_session_factory),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> SignInService:
    return SignInService.from_session_factory(session_factory, issuer)


def get_current_player_id(
    authorization: str | None = Header(default=None),
    issuer: SessionIssuer = Depends(get_session_issuer),
) -> uuid.UUID:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    try:
        claims = issuer.verify(parts[1])
    except (InvalidSessionToken, SigningUnavailable):
        raise HTTPException(status_code=401, detail="Invalid token")
    return claims.subject


def get_current_player(
    player_id: uuid.UUID = Depends(get_current_player_id),
    service: SignInService = Depends(get_sign_in_service),
) -> Player:
    try:
        return service.player_by_id(player_id)
    except PlayerNotFound:
        raise HTTPException(status_code=401, detail="Player not found")
