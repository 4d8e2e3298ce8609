"""Remote (authoritative) match store backed by the user_current_match table."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from rrgolf.db.models import UserCurrentMatch
from rrgolf.db.session import get_session, get_session_factory
from rrgolf.errors import PersistenceError


class RemoteMatchStore:
    """
    One serialized match per owner identity.

    Methods are blocking; the synchronizer runs them off the event loop.
    Database failures surface as PersistenceError.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self.session_factory = session_factory or get_session_factory()

    def load(self, user_id: str) -> Optional[dict[str, Any]]:
        try:
            with get_session(self.session_factory) as session:
                row = session.get(UserCurrentMatch, user_id)
                return None if row is None else row.match_data
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load match for {user_id}: {exc}") from exc

    def save(self, user_id: str, match_data: dict[str, Any]) -> None:
        """Upsert the owner's match document."""
        try:
            with get_session(self.session_factory) as session:
                row = session.get(UserCurrentMatch, user_id)
                if row is None:
                    session.add(
                        UserCurrentMatch(
                            user_id=user_id,
                            match_data=match_data,
                            updated_at=datetime.utcnow(),
                        )
                    )
                else:
                    row.match_data = match_data
                    row.updated_at = datetime.utcnow()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to save match for {user_id}: {exc}") from exc

    def delete(self, user_id: str) -> None:
        try:
            with get_session(self.session_factory) as session:
                session.query(UserCurrentMatch).filter(UserCurrentMatch.user_id == user_id).delete()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to clear match for {user_id}: {exc}") from exc

    def has_saved(self, user_id: str) -> bool:
        try:
            with get_session(self.session_factory) as session:
                return session.get(UserCurrentMatch, user_id) is not None
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to check saved match for {user_id}: {exc}") from exc
