"""
Share code records for spectator access.

An owner holds at most one active 4-digit code. Creating a new one
retires the old; a retired code resolves to "expired" instead of being
handed straight to somebody else. Spectators resolve a code to its owner
and read that owner's persisted match, never writing anything.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from rrgolf.config import settings
from rrgolf.db.models import MatchShare, UserCurrentMatch
from rrgolf.db.session import get_session, get_session_factory
from rrgolf.errors import (
    InvalidShareCodeFormatError,
    PersistenceError,
    ShareCodeError,
    ShareCodeExhaustedError,
    ShareCodeNotFoundError,
    SharedMatchNotFoundError,
)
from rrgolf.match.models import MatchState
from rrgolf.persistence.schema import state_from_record
from rrgolf.sharing.codes import generate_share_code, validate_share_code_format

logger = logging.getLogger(__name__)


class ShareCodeStore:
    """
    Issues, retires and resolves share codes.

    Methods are blocking SQLAlchemy calls; async callers wrap them in
    asyncio.to_thread.

    Usage:
        store = ShareCodeStore()
        code = store.create_share_code("user-123")     # e.g. "0427"
        snapshot = store.fetch_by_share_code(code)     # owner's MatchState
    """

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        max_attempts: Optional[int] = None,
        generate: Callable[[], str] = generate_share_code,
    ):
        self.session_factory = session_factory or get_session_factory()
        self.max_attempts = max_attempts or settings.share_code_max_attempts
        self._generate = generate

    # =========================================================
    # OWNER SIDE
    # =========================================================

    def create_share_code(self, user_id: str) -> str:
        """
        Retire the owner's active codes and issue a fresh one.

        Raises:
            ShareCodeExhaustedError: every attempt collided with a code in use
            PersistenceError: the database failed for another reason
        """
        if not user_id:
            raise ShareCodeError("User ID is required to create share code")

        self.deactivate_share_codes(user_id)

        for attempt in range(1, self.max_attempts + 1):
            code = self._generate()
            try:
                with get_session(self.session_factory) as session:
                    if self._is_reserved(session, code):
                        logger.debug("Share code collision on attempt %d", attempt)
                        continue
                    session.add(MatchShare(user_id=user_id, share_code=code, is_active=True))
            except IntegrityError:
                # Lost a race for the same code; try another
                logger.debug("Share code insert conflict on attempt %d", attempt)
                continue
            except SQLAlchemyError as exc:
                raise PersistenceError(f"Failed to create share code: {exc}") from exc

            logger.info("Issued share code for %s", user_id)
            return code

        logger.error("Failed to generate unique share code after %d attempts", self.max_attempts)
        raise ShareCodeExhaustedError()

    def get_share_code(self, user_id: str) -> Optional[str]:
        """The owner's active code, if any."""
        if not user_id:
            return None
        try:
            with get_session(self.session_factory) as session:
                return session.scalar(
                    select(MatchShare.share_code).where(
                        MatchShare.user_id == user_id,
                        MatchShare.is_active.is_(True),
                    )
                )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to get share code: {exc}") from exc

    def deactivate_share_codes(self, user_id: str) -> int:
        """Retire every active code of the owner. Returns how many were retired."""
        if not user_id:
            return 0
        try:
            with get_session(self.session_factory) as session:
                return (
                    session.query(MatchShare)
                    .filter(MatchShare.user_id == user_id, MatchShare.is_active.is_(True))
                    .update({MatchShare.is_active: False}, synchronize_session=False)
                )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to deactivate share codes: {exc}") from exc

    @staticmethod
    def _is_reserved(session: Session, code: str) -> bool:
        if session.scalar(
            select(MatchShare.id).where(
                MatchShare.share_code == code,
                MatchShare.is_active.is_(True),
            )
        ) is not None:
            return True

        # A retired code stays reserved while its owner has a newer active code
        retired_owners = select(MatchShare.user_id).where(
            MatchShare.share_code == code,
            MatchShare.is_active.is_(False),
        )
        return session.scalar(
            select(MatchShare.id).where(
                MatchShare.user_id.in_(retired_owners),
                MatchShare.is_active.is_(True),
            )
        ) is not None

    # =========================================================
    # SPECTATOR SIDE
    # =========================================================

    def resolve_owner(self, code: str) -> str:
        """
        Map an active code to its owner.

        Raises:
            InvalidShareCodeFormatError: not exactly 4 digits
            ShareCodeNotFoundError: unknown or retired code
        """
        if not validate_share_code_format(code):
            raise InvalidShareCodeFormatError()
        try:
            with get_session(self.session_factory) as session:
                user_id = session.scalar(
                    select(MatchShare.user_id).where(
                        MatchShare.share_code == code,
                        MatchShare.is_active.is_(True),
                    )
                )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to validate share code: {exc}") from exc

        if user_id is None:
            raise ShareCodeNotFoundError()
        return user_id

    def fetch_by_share_code(self, code: str) -> MatchState:
        """
        Read-only snapshot of the match behind a share code.

        Raises:
            InvalidShareCodeFormatError, ShareCodeNotFoundError: see resolve_owner
            SharedMatchNotFoundError: the owner has no saved match
            CorruptStateError: the saved match is invalid (left in place)
        """
        user_id = self.resolve_owner(code)
        try:
            with get_session(self.session_factory) as session:
                match_data = session.scalar(
                    select(UserCurrentMatch.match_data).where(UserCurrentMatch.user_id == user_id)
                )
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to load shared match: {exc}") from exc

        if match_data is None:
            raise SharedMatchNotFoundError()
        return state_from_record(match_data)
