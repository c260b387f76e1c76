from __future__ import annotations

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from gamehub.models.provider import Provider
from gamehub.models.third_party_identity import ThirdPartyIdentity
from gamehub.services.errors import IdentityConflict, StorageUnavailable

logger = logging.getLogger(__name__)


class IdentityStore:
    """
    Maps third-party identities to player ids.

    Links are insert-only. Uniqueness of (provider, external_id) is enforced by
    the table's primary key, so two concurrent `create_link` calls for the same
    pair end with one success and one `IdentityConflict`.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def find_player_id(self, provider: Provider, external_id: str) -> uuid.UUID | None:
        try:
            with self._session_factory() as db:
                return db.execute(
                    select(ThirdPartyIdentity.player_id).where(
                        ThirdPartyIdentity.provider == provider,
                        ThirdPartyIdentity.external_id == external_id,
                    )
                ).scalars().one_or_none()
        except (OperationalError, InterfaceError) as exc:
            logger.warning("identity lookup failed provider=%s", provider.value, exc_info=True)
            raise StorageUnavailable("identity lookup failed") from exc

    def create_link(self, provider: Provider, external_id: str, player_id: uuid.UUID) -> None:
        try:
            with self._session_factory() as db:
                db.add(
                    ThirdPartyIdentity(
                        provider=provider,
                        external_id=external_id,
                        player_id=player_id,
                    )
                )
                try:
                    db.commit()
                except IntegrityError as exc:
                    db.rollback()
                    raise IdentityConflict(
                        f"{provider.value} identity is already linked to a player"
                    ) from exc
        except (OperationalError, InterfaceError) as exc:
            logger.warning("identity link insert failed provider=%s", provider.value, exc_info=True)
            raise StorageUnavailable("identity link insert failed") from exc
