import threading
import uuid
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gamehub.db.base import Base
from gamehub.models.player import Player
from gamehub.models.provider import Provider
from gamehub.models.third_party_identity import ThirdPartyIdentity
from gamehub.services.errors import PlayerNotFound
from gamehub.services.identity_store import IdentityStore
from gamehub.services.player_repository import PlayerRepository
from gamehub.services.resolver import IdentityResolver


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _resolver(session_factory, store=None):
    return IdentityResolver(
        store or IdentityStore(session_factory), PlayerRepository(session_factory)
    )


def _count(session_factory, model):
    with session_factory() as db:
        return db.execute(select(func.count()).select_from(model)).scalar_one()


def test_first_sign_in_creates_and_links_player(session_factory):
    player = _resolver(session_factory).resolve(Provider.GOOGLE, "abc123", "Ada")

    assert player.screen_name == "Ada"
    assert IdentityStore(session_factory).find_player_id(Provider.GOOGLE, "abc123") == player.id
    assert _count(session_factory, Player) == 1


def test_repeat_sign_in_returns_same_player_unchanged(session_factory):
    resolver = _resolver(session_factory)
    first = resolver.resolve(Provider.GOOGLE, "abc123", "Ada")

    again = resolver.resolve(Provider.GOOGLE, "abc123", "Someone Else")

    assert again.id == first.id
    assert again.screen_name == "Ada"
    assert _count(session_factory, Player) == 1
    assert _count(session_factory, ThirdPartyIdentity) == 1


def test_distinct_external_ids_get_distinct_players(session_factory):
    resolver = _resolver(session_factory)
    ids = {resolver.resolve(Provider.GOOGLE, f"user-{i}", "Ada").id for i in range(5)}
    assert len(ids) == 5


def test_link_to_missing_player_is_not_found(session_factory):
    # SQLite test engine does not enforce foreign keys, so a dangling link can be planted.
    with session_factory() as db:
        db.add(
            ThirdPartyIdentity(
                provider=Provider.GOOGLE, external_id="ghost", player_id=uuid.uuid4()
            )
        )
        db.commit()

    with pytest.raises(PlayerNotFound):
        _resolver(session_factory).resolve(Provider.GOOGLE, "ghost", "Ada")

    assert _count(session_factory, Player) == 0


class _RacingIdentityStore(IdentityStore):
    """Lets a competing sign-in finish between our lookup and our link insert."""

    def __init__(self, session_factory, competitor):
        super().__init__(session_factory)
        self._competitor = competitor

    def find_player_id(self, provider, external_id):
        found = super().find_player_id(provider, external_id)
        if self._competitor is not None:
            competitor, self._competitor = self._competitor, None
            competitor()
        return found


def test_losing_a_race_returns_the_winner_and_leaves_one_orphan(session_factory):
    winner = {}

    def competing_sign_in():
        winner["player"] = _resolver(session_factory).resolve(Provider.GOOGLE, "xyz789", "Grace")

    store = _RacingIdentityStore(session_factory, competing_sign_in)
    loser_result = _resolver(session_factory, store).resolve(Provider.GOOGLE, "xyz789", "Alan")

    assert loser_result.id == winner["player"].id
    assert loser_result.screen_name == "Grace"
    assert _count(session_factory, ThirdPartyIdentity) == 1
    assert _count(session_factory, Player) == 2

    with session_factory() as db:
        linked = set(db.execute(select(ThirdPartyIdentity.player_id)).scalars())
        orphans = db.execute(select(Player).where(Player.id.not_in(linked))).scalars().all()
    assert [p.screen_name for p in orphans] == ["Alan"]


class _BarrierIdentityStore(IdentityStore):
    """Holds every caller at create_link until all of them have got there."""

    def __init__(self, session_factory, barrier):
        super().__init__(session_factory)
        self._barrier = barrier

    def create_link(self, provider, external_id, player_id):
        self._barrier.wait(timeout=10)
        return super().create_link(provider, external_id, player_id)


def test_concurrent_first_sign_ins_converge_on_one_player(tmp_path):
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'race.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    hints = ["Ada", "Grace"]
    barrier = threading.Barrier(len(hints))
    store = _BarrierIdentityStore(session_factory, barrier)
    resolver = _resolver(session_factory, store)

    with ThreadPoolExecutor(max_workers=len(hints)) as pool:
        results = list(
            pool.map(lambda hint: resolver.resolve(Provider.GOOGLE, "xyz789", hint), hints)
        )

    assert len({p.id for p in results}) == 1
    assert results[0].screen_name in hints
    assert _count(session_factory, ThirdPartyIdentity) == 1
    # Both callers created a player before linking; the loser's stays unlinked.
    assert _count(session_factory, Player) == 2
    engine.dispose()
