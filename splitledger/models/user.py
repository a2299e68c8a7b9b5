"""
SplitLedger Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table (the Account Directory's records).
Who:   Used by UserService for registration and lookups, and by Alembic.

Table Design:
    - UUID primary key, assigned in Python so the id is known after flush
    - email and mobile_number carry UNIQUE constraints; the service checks
      first for a friendly message, the constraint closes the race window
    - password_hash holds a bcrypt string (salt embedded); never serialized
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from splitledger.database import Base


class User(Base):
    """
    A registered user.

    Lifecycle:
        Created once by registration; no update or delete path exists.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(120), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
    )

    # Exactly 10 digits; validated by the request schema
    mobile_number: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        unique=True,
    )

    # bcrypt output is 60 chars; headroom for other schemes
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        # password_hash deliberately left out
        return f"<User(id={self.id}, name='{self.name}', email='{self.email}')>"
