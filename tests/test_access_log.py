"""Unit tests for the access log — it must never raise to its caller."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta
from unittest.mock import MagicMock
from parqueo.models.access_attempt import AccessAttempt
from parqueo.models.enums import AttemptType
from parqueo.services import access_log


class TestAppend:
    def test_writes_normalized_attempt(self, db):
        access_log.append(db, " abc123 ", AttemptType.ENTRY, success=False, reason="NO_AVAILABLE_SPACES")

        row = db.query(AccessAttempt).one()
        assert row.license_plate == "ABC123"
        assert row.attempt_type == "ENTRY"
        assert row.success is False
        assert row.failure_reason == "NO_AVAILABLE_SPACES"

    def test_commit_failure_is_swallowed(self):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("db down")

        access_log.append(db, "ABC123", AttemptType.ENTRY, success=False, reason="X")

        db.add.assert_called_once()
        db.rollback.assert_called_once()

    def test_rollback_failure_is_swallowed_too(self):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("db down")
        db.rollback.side_effect = RuntimeError("still down")

        access_log.append(db, "ABC123", AttemptType.ENTRY, success=False)

    def test_failure_log_names_attempt_type_by_value(self, caplog):
        db = MagicMock()
        db.commit.side_effect = RuntimeError("db down")

        access_log.append(db, "ABC123", AttemptType.ENTRY, success=False, reason="X")

        assert "Could not log ENTRY attempt for ABC123" in caplog.text
        assert "AttemptType." not in caplog.text

    def test_staged_write_uses_savepoint(self):
        db = MagicMock()

        access_log.append(db, "ABC123", AttemptType.ENTRY, success=True, commit=False)

        db.begin_nested.assert_called_once()
        db.commit.assert_not_called()


class TestFailedAttempts:
    def test_range_lot_and_pagination(self, db, make_lot):
        main, aires = make_lot("Main"), make_lot("Aires")
        now = datetime.utcnow()
        for i in range(5):
            access_log.append(db, f"P{i}", AttemptType.ENTRY, success=False, reason="NO_AVAILABLE_SPACES",
                              parking_id=main.id, attempt_time=now - timedelta(minutes=i))
        access_log.append(db, "OK1", AttemptType.ENTRY, success=True, parking_id=main.id, attempt_time=now)
        access_log.append(db, "AIR", AttemptType.ENTRY, success=False, parking_id=aires.id, attempt_time=now)
        access_log.append(db, "OLD", AttemptType.ENTRY, success=False, parking_id=main.id,
                          attempt_time=now - timedelta(days=90))

        rows, total = access_log.failed_attempts(db, now - timedelta(days=1), now, main.id, page=1, limit=2)
        _, everywhere = access_log.failed_attempts(db, now - timedelta(days=1), now)

        assert total == 5
        assert [r.license_plate for r in rows] == ["P0", "P1"]
        assert everywhere == 6


class TestOfficerLink:
    def test_officer_without_user_row_is_not_linked(self, db, make_user):
        officer_id = make_user("SECURITY_OFFICER").id

        access_log.append(db, "AAA111", AttemptType.ENTRY, success=False, reason="X", officer_id=officer_id)
        access_log.append(db, "BBB222", AttemptType.ENTRY, success=False, reason="X", officer_id=999)

        rows = db.query(AccessAttempt).order_by(AccessAttempt.id).all()
        assert [r.license_plate for r in rows] == ["AAA111", "BBB222"]
        assert [r.security_officer_id for r in rows] == [officer_id, None]
