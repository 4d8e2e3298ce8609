"""
Database module for rrgolf.

Provides SQLAlchemy ORM models and session management for the remote
(authoritative) match store and share codes.

Usage:
    from rrgolf.db import get_session, UserCurrentMatch

    with get_session() as session:
        row = session.get(UserCurrentMatch, "user-123")
"""

from rrgolf.db.models import Base, MatchShare, UserCurrentMatch
from rrgolf.db.session import get_engine, get_session, get_session_factory

__all__ = [
    # Base
    "Base",
    # Models
    "MatchShare",
    "UserCurrentMatch",
    # Session
    "get_engine",
    "get_session",
    "get_session_factory",
]
