import uuid
from datetime import datetime

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from gamehub.db.base import Base

SCREEN_NAME_MAX_LENGTH = 30


class Player(Base):
    __tablename__ = "player"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    screen_name: Mapped[str] = mapped_column(String(SCREEN_NAME_MAX_LENGTH), nullable=False)

    # Stamped by the application at creation, never updated.
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
