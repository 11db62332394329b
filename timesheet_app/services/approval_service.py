"""
Approval Service
Applies approve/reject decisions to timesheets level by level
"""

from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from timesheet_app.config.approval_levels import (
    APPROVAL_LEVELS,
    REJECTED_STATUS,
    ApprovalLevelConfig,
    ApprovalLevelRegistry,
)
from timesheet_app.models.approval import Approval, ApprovalAction
from timesheet_app.models.timesheet import Timesheet
from timesheet_app.models.user import User
from timesheet_app.utils.exceptions import (
    ApprovalAuthorizationError,
    InvalidTransitionError,
    NotFoundError,
)
from timesheet_app.utils.logger import setup_logger, log_audit

logger = setup_logger()


def in_team(employee: User, approver: User) -> bool:
    """
    Whether a team-scoped approver may act for the employee

    Employees with no assigned manager are shared by every approver at the level.
    """
    return employee.manager_id is None or employee.manager_id == approver.id


def team_filter(approver: User):
    """SQL counterpart of in_team for timesheet queries"""
    return Timesheet.employee.has(
        or_(User.manager_id.is_(None), User.manager_id == approver.id)
    )


class ApprovalService:
    """Multi-level approval workflow"""

    def __init__(self, levels: ApprovalLevelRegistry = APPROVAL_LEVELS):
        self.levels = levels

    def can_act(self, level: ApprovalLevelConfig, timesheet: Timesheet, approver: User) -> bool:
        """Whether the approver holds the level's role and, if scoped, leads the owner's team"""
        if approver.role.value != level.role:
            return False
        if level.team_scoped:
            return in_team(timesheet.employee, approver)
        return True

    def awaiting(self, user: User):
        """
        Filter matching timesheets waiting on the user's level

        Returns:
            SQL expression, or None if the user's role approves no level
        """
        level = self.levels.level_for_role(user.role.value)
        if level is None:
            return None
        if level.team_scoped:
            return (Timesheet.status == level.status) & team_filter(user)
        return Timesheet.status == level.status

    def decide(
        self,
        db: Session,
        timesheet: Timesheet,
        approver: User,
        action: ApprovalAction,
        comments: Optional[str] = None,
    ) -> Approval:
        """
        Record a decision and advance the timesheet status

        Args:
            db: Database session
            timesheet: Timesheet awaiting a decision
            approver: Acting user
            action: Approve or reject
            comments: Optional remarks

        Returns:
            Approval: The persisted approval record

        Raises:
            InvalidTransitionError: If the timesheet is not waiting on any level
            ApprovalAuthorizationError: If the approver's role does not match the level,
                or a team-scoped level is decided outside the approver's team
        """
        action = ApprovalAction(action)
        index = self.levels.index_for_status(timesheet.status)

        if index is None:
            raise InvalidTransitionError(
                f"Timesheet is not awaiting approval (status: {timesheet.status})"
            )

        level = self.levels.level_at(index)
        if approver.role.value != level.role:
            logger.warning(
                f"{approver.email} ({approver.role.value}) tried to {action.value} "
                f"timesheet {timesheet.id} at {level.key} level"
            )
            raise ApprovalAuthorizationError(
                f"{level.display} approval required; your role is {approver.role.value}"
            )

        if not self.can_act(level, timesheet, approver):
            logger.warning(
                f"{approver.email} tried to {action.value} timesheet {timesheet.id} outside their team"
            )
            raise ApprovalAuthorizationError("Timesheet belongs to another manager's team")

        record = Approval(
            timesheet_id=timesheet.id,
            approver_id=approver.id,
            level=level.key,
            action=action,
            comments=comments,
        )
        db.add(record)

        previous_status = timesheet.status
        if action == ApprovalAction.APPROVE:
            timesheet.status = self.levels.next_status(index)
        else:
            timesheet.status = REJECTED_STATUS
            if comments:
                timesheet.manager_remarks = comments

        db.commit()
        db.refresh(record)
        db.refresh(timesheet)

        logger.info(
            f"Timesheet {timesheet.id}: {action.value} at {level.key} by {approver.email} "
            f"({previous_status} -> {timesheet.status})"
        )
        log_audit(
            approver.id,
            f"TIMESHEET_{action.value.upper()}",
            f"timesheet={timesheet.id} level={level.key} status={previous_status}->{timesheet.status}",
        )
        return record

    def decide_by_id(
        self,
        db: Session,
        timesheet_id: str,
        approver: User,
        action: ApprovalAction,
        comments: Optional[str] = None,
    ) -> Approval:
        # Row lock so two approvers at the same level cannot both pass the status check
        timesheet = (
            db.query(Timesheet)
            .filter(Timesheet.id == timesheet_id)
            .with_for_update()
            .first()
        )
        if not timesheet:
            raise NotFoundError("Timesheet not found")
        return self.decide(db, timesheet, approver, action, comments)

    def has_decided(self, db: Session, timesheet_id: str, user: User) -> bool:
        """Whether the user has recorded a decision on the timesheet"""
        return db.query(Approval.id).filter(
            Approval.timesheet_id == timesheet_id,
            Approval.approver_id == user.id,
        ).first() is not None

    def pending_for(self, db: Session, user: User) -> List[Timesheet]:
        """Timesheets waiting on the level the user's role approves, limited to their team where scoped"""
        criterion = self.awaiting(user)
        if criterion is None:
            return []

        return (
            db.query(Timesheet)
            .filter(criterion)
            .order_by(Timesheet.date.desc(), Timesheet.created_at.desc())
            .all()
        )

    def history(self, db: Session, timesheet_id: str) -> List[Approval]:
        """Approval records for a timesheet in the order they were made"""
        if not db.query(Timesheet.id).filter(Timesheet.id == timesheet_id).first():
            raise NotFoundError("Timesheet not found")

        return (
            db.query(Approval)
            .filter(Approval.timesheet_id == timesheet_id)
            .order_by(Approval.created_at.asc())
            .all()
        )


# Create singleton instance
approval_service = ApprovalService()
