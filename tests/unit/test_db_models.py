"""Unit tests for the remote store tables and their constraints."""

import pytest
from sqlalchemy.exc import IntegrityError

from rrgolf.db.models import MatchShare, UserCurrentMatch


def test_match_document_round_trip(db_session):
    db_session.add(UserCurrentMatch(user_id="user-1", match_data={"phase": "scoring", "currentHole": 3}))
    db_session.flush()
    db_session.expire_all()

    row = db_session.get(UserCurrentMatch, "user-1")
    assert row.match_data == {"phase": "scoring", "currentHole": 3}
    assert row.created_at is not None
    assert row.updated_at is not None


def test_one_active_row_per_code(db_session):
    db_session.add(MatchShare(user_id="user-1", share_code="0427", is_active=True))
    db_session.flush()

    db_session.add(MatchShare(user_id="user-2", share_code="0427", is_active=True))
    with pytest.raises(IntegrityError):
        db_session.flush()


def test_one_active_code_per_user(db_session):
    db_session.add(MatchShare(user_id="user-1", share_code="1111", is_active=True))
    db_session.flush()

    db_session.add(MatchShare(user_id="user-1", share_code="2222", is_active=True))
    with pytest.raises(IntegrityError):
        db_session.flush()


def test_retired_rows_do_not_conflict(db_session):
    db_session.add_all(
        [
            MatchShare(user_id="user-1", share_code="0427", is_active=False),
            MatchShare(user_id="user-1", share_code="0427", is_active=False),
            MatchShare(user_id="user-1", share_code="0427", is_active=True),
        ]
    )
    db_session.flush()
    assert db_session.query(MatchShare).count() == 3
