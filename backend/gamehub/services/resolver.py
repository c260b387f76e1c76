from __future__ import annotations

import logging
import uuid

from gamehub.models.player import Player
from gamehub.models.provider import Provider
from gamehub.services.errors import IdentityConflict, PlayerNotFound
from gamehub.services.identity_store import IdentityStore
from gamehub.services.player_repository import PlayerRepository

logger = logging.getLogger(__name__)


class IdentityResolver:
    """
    Resolves a verified third-party identity to its player, creating one on
    first sign-in.

    Creation is optimistic: a new player is inserted first and then linked.
    When two callers race for the same identity the link's primary key lets
    exactly one of them win; the loser's player stays behind unlinked (an
    orphan) and the loser returns the winner's player after one more lookup.
    No locks are taken and there is never more than one retry.
    """

    def __init__(self, identities: IdentityStore, players: PlayerRepository):
        self._identities = identities
        self._players = players

    def resolve(self, provider: Provider, external_id: str, screen_name_hint: str | None) -> Player:
        existing = self._linked_player(provider, external_id)
        if existing is not None:
            return existing

        player = self._players.create(screen_name_hint)
        try:
            self._identities.create_link(provider, external_id, player.id)
        except IdentityConflict:
            logger.info(
                "lost sign-up race provider=%s orphan_player_id=%s",
                provider.value,
                player.id,
            )
            winner = self._linked_player(provider, external_id)
            if winner is None:
                # The constraint rejected our insert, so a link must exist.
                logger.error(
                    "identity conflict without a visible link provider=%s", provider.value
                )
                raise PlayerNotFound(f"no player linked to {provider.value} identity")
            return winner

        logger.info("created player player_id=%s provider=%s", player.id, provider.value)
        return player

    def _linked_player(self, provider: Provider, external_id: str) -> Player | None:
        player_id = self._identities.find_player_id(provider, external_id)
        if player_id is None:
            return None
        return self._require_player(player_id, provider)

    def _require_player(self, player_id: uuid.UUID, provider: Provider) -> Player:
        player = self._players.get(player_id)
        if player is None:
            logger.error(
                "identity link points at missing player player_id=%s provider=%s",
                player_id,
                provider.value,
            )
            raise PlayerNotFound(f"player {player_id} referenced by an identity link is missing")
        return player
