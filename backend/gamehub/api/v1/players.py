import logging
import uuid
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from gamehub.api.deps import get_current_player, get_sign_in_service
from gamehub.auth.google import IdTokenError, VerifiedIdentity, verify_google_id_token
from gamehub.models.player import Player
from gamehub.models.provider import Provider
from gamehub.services.errors import SignInError, StorageUnavailable
from gamehub.services.sign_in import SignInService

logger = logging.getLogger(__name__)

router = APIRouter()


class SignInIn(BaseModel):
    provider: Provider
    id_token: str


class SignInOut(BaseModel):
    auth_token: str
    expires_at: datetime


class PlayerOut(BaseModel):
    id: uuid.UUID
    screen_name: str
    joined_at: datetime

    class Config:
        from_attributes = True


def _verify_id_token(provider: Provider, id_token: str) -> VerifiedIdentity:
    if provider is Provider.GOOGLE:
        return verify_google_id_token(id_token)
    raise IdTokenError(f"Unsupported provider {provider.value}")


@router.post("/players/sign_in", response_model=SignInOut)
def sign_in(
    payload: SignInIn,
    service: SignInService = Depends(get_sign_in_service),
):
    try:
        identity = _verify_id_token(payload.provider, payload.id_token)
    except IdTokenError as exc:
        logger.info("rejected %s id token: %s", payload.provider.value, exc)
        raise HTTPException(status_code=400, detail="Invalid ID token")
    except SignInError:
        logger.exception("sign-in failed provider=%s", payload.provider.value)
        raise HTTPException(status_code=500, detail="sign-in failed")

    try:
        credential = service.sign_in(
            identity.provider, identity.external_id, identity.screen_name_hint
        )
    except StorageUnavailable:
        raise HTTPException(status_code=503, detail="sign-in failed")
    except SignInError:
        logger.exception("sign-in failed provider=%s", identity.provider.value)
        raise HTTPException(status_code=500, detail="sign-in failed")

    return SignInOut(auth_token=credential.token, expires_at=credential.expires_at)


@router.get("/players/player_info", response_model=PlayerOut)
def player_info(player: Player = Depends(get_current_player)):
    return player
