import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gamehub.db.base import Base
from gamehub.services.errors import StorageUnavailable
from gamehub.services.player_repository import PlayerRepository, screen_name_for


@pytest.fixture()
def players():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return PlayerRepository(sessionmaker(autocommit=False, autoflush=False, bind=engine))


def test_create_and_get(players):
    created = players.create("  Ada  ")

    assert isinstance(created.id, uuid.UUID)
    assert created.screen_name == "Ada"
    assert created.joined_at is not None

    fetched = players.get(created.id)
    assert fetched is not None
    assert fetched.id == created.id
    assert fetched.screen_name == "Ada"


def test_every_player_gets_a_new_id(players):
    a = players.create("Ada")
    b = players.create("Ada")
    assert a.id != b.id


def test_get_unknown_player(players):
    assert players.get(uuid.uuid4()) is None


def test_screen_name_for():
    player_id = uuid.UUID(int=0xABCDEF12 << 96)

    assert screen_name_for("Grace", player_id) == "Grace"
    assert screen_name_for("w" * 40, player_id) == "w" * 30
    assert screen_name_for("   ", player_id) == "player-abcdef12"
    assert screen_name_for(None, player_id) == "player-abcdef12"


@pytest.mark.parametrize("error", [OperationalError, InterfaceError])
def test_storage_errors_are_reported_as_unavailable(error):
    def broken_factory():
        raise error("SELECT 1", {}, Exception("connection refused"))

    broken = PlayerRepository(broken_factory)

    with pytest.raises(StorageUnavailable):
        broken.create("Ada")
    with pytest.raises(StorageUnavailable):
        broken.get(uuid.uuid4())
