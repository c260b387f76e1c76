from __future__ import annotations

import uuid

from sqlalchemy.orm import Session, sessionmaker

from gamehub.models.player import Player
from gamehub.models.provider import Provider
from gamehub.services.errors import PlayerNotFound
from gamehub.services.identity_store import IdentityStore
from gamehub.services.player_repository import PlayerRepository
from gamehub.services.resolver import IdentityResolver
from gamehub.services.session_issuer import SessionCredential, SessionIssuer


class SignInService:
    """Resolves a verified identity to a player and issues a session for it."""

    def __init__(self, resolver: IdentityResolver, issuer: SessionIssuer, players: PlayerRepository):
        self._resolver = resolver
        self._issuer = issuer
        self._players = players

    @classmethod
    def from_session_factory(
        cls, session_factory: sessionmaker[Session], issuer: SessionIssuer
    ) -> SignInService:
        players = PlayerRepository(session_factory)
        resolver = IdentityResolver(IdentityStore(session_factory), players)
        return cls(resolver, issuer, players)

    def sign_in(
        self, provider: Provider, external_id: str, screen_name_hint: str | None
    ) -> SessionCredential:
        player = self._resolver.resolve(provider, external_id, screen_name_hint)
        return self._issuer.issue(player)

    def player_by_id(self, player_id: uuid.UUID) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise PlayerNotFound(f"player {player_id} not found")
        return player
