"""
SQLAlchemy ORM models for the rrgolf remote store.

Tables:
- user_current_match: one serialized match per owner identity
- match_shares: 4-digit spectator codes mapped to an owner

Key design decisions:
- The match is stored as a single JSON document (JSONB on PostgreSQL)
  rather than normalized rows; it is always read and written whole.
- At most one active share code per owner, and an active code belongs to
  exactly one owner. Both rules are partial unique indexes so the database
  enforces them even under concurrent inserts.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Plain JSON on SQLite (tests, single-device installs), JSONB on PostgreSQL
JSONDocument = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class UserCurrentMatch(Base):
    """The owner's current match, serialized in full."""

    __tablename__ = "user_current_match"

    user_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    match_data: Mapped[dict] = mapped_column(JSONDocument, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<UserCurrentMatch(user_id='{self.user_id}', updated_at={self.updated_at})>"


class MatchShare(Base):
    """
    Spectator share code.

    Superseded codes are kept with is_active=False rather than deleted so
    an old code keeps resolving to "expired" instead of someone else's match.
    """

    __tablename__ = "match_shares"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    share_code: Mapped[str] = mapped_column(String(4), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("idx_match_shares_user_id", "user_id"),
        Index(
            "uq_match_shares_active_code",
            "share_code",
            unique=True,
            postgresql_where=text("is_active = true"),
            sqlite_where=text("is_active = 1"),
        ),
        Index(
            "uq_match_shares_active_user",
            "user_id",
            unique=True,
            postgresql_where=text("is_active = true"),
            sqlite_where=text("is_active = 1"),
        ),
    )

    def __repr__(self) -> str:
        return f"<MatchShare(code='{self.share_code}', user_id='{self.user_id}', active={self.is_active})>"
