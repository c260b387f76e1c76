from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from gamehub.models.player import SCREEN_NAME_MAX_LENGTH, Player
from gamehub.services.errors import StorageUnavailable

logger = logging.getLogger(__name__)


def screen_name_for(hint: str | None, player_id: uuid.UUID) -> str:
    """Trimmed hint, cut to the column size; a generated name when the hint is blank."""
    name = (hint or "").strip()[:SCREEN_NAME_MAX_LENGTH].strip()
    return name or f"player-{player_id.hex[:8]}"


class PlayerRepository:
    """Creates and reads players. The only writer of new player rows."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def create(self, screen_name: str | None) -> Player:
        player_id = uuid.uuid4()
        player = Player(
            id=player_id,
            screen_name=screen_name_for(screen_name, player_id),
            joined_at=datetime.now(timezone.utc),
        )
        try:
            with self._session_factory() as db:
                db.add(player)
                db.commit()
                db.refresh(player)
        except (OperationalError, InterfaceError) as exc:
            logger.warning("player insert failed", exc_info=True)
            raise StorageUnavailable("player insert failed") from exc
        return player

    def get(self, player_id: uuid.UUID) -> Player | None:
        try:
            with self._session_factory() as db:
                return db.get(Player, player_id)
        except (OperationalError, InterfaceError) as exc:
            logger.warning("player lookup failed player_id=%s", player_id, exc_info=True)
            raise StorageUnavailable("player lookup failed") from exc
