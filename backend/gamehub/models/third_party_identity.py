import uuid

from sqlalchemy import Enum, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gamehub.db.base import Base
from gamehub.models.provider import Provider


class ThirdPartyIdentity(Base):
    __tablename__ = "third_party_identity"

    # Composite primary key: at most one row per (provider, external_id).
    provider: Mapped[Provider] = mapped_column(
        Enum(
            Provider,
            name="third_party_provider",
            values_callable=lambda members: [m.value for m in members],
        ),
        primary_key=True,
    )
    # Subject id assigned by the provider, unique only within that provider.
    external_id: Mapped[str] = mapped_column(Text, primary_key=True)

    player_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("player.id", ondelete="RESTRICT"), nullable=False, index=True
    )
