"""
Approval Workflow Tests
Service-level tests for the manager -> HR -> director chain
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from datetime import date
from loguru import logger
from sqlalchemy import event
from sqlalchemy.dialects import postgresql

from timesheet_app.models.approval import Approval, ApprovalAction
from timesheet_app.models.timesheet import Timesheet
from timesheet_app.models.user import UserRole
from timesheet_app.services.approval_service import approval_service
from timesheet_app.utils.exceptions import (
    ApprovalAuthorizationError,
    ImmutableRecordError,
    InvalidTransitionError,
    NotFoundError,
)


@pytest.fixture
def pending_timesheet(db_session, staff):
    """Timesheet waiting on the manager"""
    timesheet = Timesheet(
        employee_id=staff["employee"].id,
        date=date(2026, 3, 2),
        start_time="09:00",
        end_time="17:00",
        total_hours=8.0,
        status="pending_manager",
    )
    db_session.add(timesheet)
    db_session.commit()
    db_session.refresh(timesheet)
    return timesheet


class TestApprovalChain:
    """Approvals advance one level at a time"""

    def test_full_chain_reaches_final_status(self, db_session, staff, pending_timesheet):
        expected = ["pending_hr", "pending_director", "approved_final"]

        for role, next_status in zip(["manager", "hr", "director"], expected):
            record = approval_service.decide(db_session, pending_timesheet, staff[role], ApprovalAction.APPROVE)
            assert record.level == role
            assert record.action == ApprovalAction.APPROVE
            assert pending_timesheet.status == next_status

        history = approval_service.history(db_session, pending_timesheet.id)
        assert [record.level for record in history] == ["manager", "hr", "director"]
        assert all(record.created_at is not None for record in history)

    def test_wrong_role_is_refused(self, db_session, staff, pending_timesheet):
        with pytest.raises(ApprovalAuthorizationError):
            approval_service.decide(db_session, pending_timesheet, staff["hr"], ApprovalAction.APPROVE)

        assert pending_timesheet.status == "pending_manager"
        assert db_session.query(Approval).count() == 0

    def test_admin_cannot_skip_levels(self, db_session, staff, pending_timesheet):
        with pytest.raises(ApprovalAuthorizationError):
            approval_service.decide(db_session, pending_timesheet, staff["admin"], ApprovalAction.APPROVE)

    def test_reapproval_fails_after_advance(self, db_session, staff, pending_timesheet):
        approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)

        with pytest.raises(ApprovalAuthorizationError):
            approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)

        assert pending_timesheet.status == "pending_hr"
        assert db_session.query(Approval).count() == 1

    def test_final_status_accepts_no_decision(self, db_session, staff, pending_timesheet):
        for role in ["manager", "hr", "director"]:
            approval_service.decide(db_session, pending_timesheet, staff[role], ApprovalAction.APPROVE)

        with pytest.raises(InvalidTransitionError):
            approval_service.decide(db_session, pending_timesheet, staff["director"], ApprovalAction.APPROVE)

    def test_draft_is_not_awaiting_approval(self, db_session, staff, pending_timesheet):
        pending_timesheet.status = "draft"
        db_session.commit()

        with pytest.raises(InvalidTransitionError):
            approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)


class TestRejection:
    """Rejection ends the chain"""

    def test_reject_moves_to_rejected(self, db_session, staff, pending_timesheet):
        approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)
        record = approval_service.decide(
            db_session, pending_timesheet, staff["hr"], ApprovalAction.REJECT, comments="Hours look wrong"
        )

        assert record.action == ApprovalAction.REJECT
        assert record.level == "hr"
        assert pending_timesheet.status == "rejected"
        assert pending_timesheet.manager_remarks == "Hours look wrong"

    def test_rejected_timesheet_cannot_be_approved(self, db_session, staff, pending_timesheet):
        approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.REJECT)

        with pytest.raises(InvalidTransitionError):
            approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)


class TestApprovalRecords:
    """Approval records are append-only"""

    def test_update_is_refused(self, db_session, staff, pending_timesheet):
        record = approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)

        record.comments = "edited later"
        with pytest.raises(ImmutableRecordError):
            db_session.commit()
        db_session.rollback()

    def test_delete_is_refused(self, db_session, staff, pending_timesheet):
        record = approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)

        db_session.delete(record)
        with pytest.raises(ImmutableRecordError):
            db_session.commit()
        db_session.rollback()

    def test_history_for_unknown_timesheet(self, db_session):
        with pytest.raises(NotFoundError):
            approval_service.history(db_session, "missing")


class TestPendingQueue:
    """Each approver sees only their level"""

    def test_pending_for_role(self, db_session, staff, pending_timesheet):
        assert approval_service.pending_for(db_session, staff["manager"]) == [pending_timesheet]
        assert approval_service.pending_for(db_session, staff["hr"]) == []
        assert approval_service.pending_for(db_session, staff["employee"]) == []

        approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)

        assert approval_service.pending_for(db_session, staff["manager"]) == []
        assert approval_service.pending_for(db_session, staff["hr"]) == [pending_timesheet]


class TestTeamScope:
    """The manager level only acts for the manager's own reports"""

    @pytest.fixture
    def other_manager(self, make_user):
        return make_user("other.manager@example.com", UserRole.MANAGER)

    @pytest.fixture
    def team_timesheet(self, db_session, staff, pending_timesheet):
        staff["employee"].manager_id = staff["manager"].id
        db_session.commit()
        return pending_timesheet

    def test_queue_limited_to_team(self, db_session, staff, other_manager, team_timesheet):
        assert approval_service.pending_for(db_session, staff["manager"]) == [team_timesheet]
        assert approval_service.pending_for(db_session, other_manager) == []

    def test_other_manager_cannot_decide(self, db_session, other_manager, team_timesheet):
        with pytest.raises(ApprovalAuthorizationError, match="another manager's team"):
            approval_service.decide(db_session, team_timesheet, other_manager, ApprovalAction.APPROVE)

        assert team_timesheet.status == "pending_manager"
        assert db_session.query(Approval).count() == 0

    def test_unassigned_employee_is_shared(self, db_session, staff, other_manager, pending_timesheet):
        assert approval_service.pending_for(db_session, other_manager) == [pending_timesheet]

        approval_service.decide(db_session, pending_timesheet, other_manager, ApprovalAction.APPROVE)

        assert pending_timesheet.status == "pending_hr"

    def test_later_levels_are_not_scoped(self, db_session, staff, make_user, team_timesheet):
        approval_service.decide(db_session, team_timesheet, staff["manager"], ApprovalAction.APPROVE)
        second_hr = make_user("hr2@example.com", UserRole.HR)

        assert approval_service.pending_for(db_session, second_hr) == [team_timesheet]


class TestDecisionSideEffects:
    """Defaults and audit trail"""

    def test_new_timesheet_defaults_to_first_level(self, db_session, staff):
        timesheet = Timesheet(
            employee_id=staff["employee"].id,
            date=date(2026, 3, 3),
            start_time="09:00",
            end_time="17:00",
        )
        db_session.add(timesheet)
        db_session.commit()

        assert timesheet.status == "pending_manager"

    def test_decision_writes_audit_line(self, db_session, staff, pending_timesheet):
        lines = []
        sink = logger.add(lines.append, filter=lambda record: "AUDIT" in record["extra"], format="{message}")
        try:
            approval_service.decide(db_session, pending_timesheet, staff["manager"], ApprovalAction.APPROVE)
        finally:
            logger.remove(sink)

        assert len(lines) == 1
        assert "ACTION=TIMESHEET_APPROVE" in lines[0]
        assert f"timesheet={pending_timesheet.id}" in lines[0]

    def test_decide_by_id_locks_the_row(self, db_session, staff, pending_timesheet):
        statements = []

        def capture(execute_state):
            if execute_state.is_select:
                statements.append(str(execute_state.statement.compile(dialect=postgresql.dialect())))

        event.listen(db_session, "do_orm_execute", capture)
        try:
            approval_service.decide_by_id(
                db_session, pending_timesheet.id, staff["manager"], ApprovalAction.APPROVE
            )
        finally:
            event.remove(db_session, "do_orm_execute", capture)

        assert any("FROM timesheets" in sql and "FOR UPDATE" in sql for sql in statements)
