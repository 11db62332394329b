"""
Timesheet Service
Hours computation, daily limits and the draft/submit lifecycle
"""

from datetime import date as date_type, datetime, timedelta
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from timesheet_app.config.approval_levels import APPROVAL_LEVELS, DRAFT_STATUS, REJECTED_STATUS
from timesheet_app.config.settings import settings
from timesheet_app.models.timesheet import Timesheet
from timesheet_app.models.user import User, UserRole
from timesheet_app.services.approval_service import approval_service
from timesheet_app.schemas.timesheet import TimesheetCreate, TimesheetUpdate
from timesheet_app.utils.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    TimesheetValidationError,
)
from timesheet_app.utils.helpers import parse_clock_time
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()

EDITABLE_STATUSES = (DRAFT_STATUS, REJECTED_STATUS)


def calculate_hours(start_time: str, end_time: str, break_minutes: int = 0) -> Tuple[float, float]:
    """
    Compute worked and overtime hours for a shift

    An end time earlier than the start time is a shift that crosses midnight.

    Args:
        start_time: Shift start as HH:MM
        end_time: Shift end as HH:MM
        break_minutes: Unpaid break length

    Returns:
        tuple: (total_hours, overtime_hours) rounded to two decimals

    Raises:
        TimesheetValidationError: If a time is not a valid HH:MM value
    """
    start = parse_clock_time(start_time)
    end = parse_clock_time(end_time)
    if start is None or end is None:
        raise TimesheetValidationError("Invalid date or time format")

    anchor = date_type(2000, 1, 1)
    start_dt = datetime.combine(anchor, start)
    end_dt = datetime.combine(anchor, end)
    if end_dt < start_dt:
        end_dt += timedelta(days=1)

    worked = (end_dt - start_dt).total_seconds() / 3600 - (break_minutes or 0) / 60
    total_hours = max(0.0, round(worked, 2))
    overtime_hours = max(0.0, round(total_hours - settings.STANDARD_WORKDAY_HOURS, 2))
    return total_hours, overtime_hours


class TimesheetService:
    """Timesheet lifecycle"""

    def _day_total(self, db: Session, employee_id: str, day: date_type, exclude_id: Optional[str] = None) -> float:
        query = db.query(Timesheet).filter(
            Timesheet.employee_id == employee_id,
            Timesheet.date == day,
            Timesheet.status != REJECTED_STATUS,
        )
        if exclude_id:
            query = query.filter(Timesheet.id != exclude_id)
        return sum(ts.total_hours or 0 for ts in query.all())

    def _check_limits(self, db: Session, employee_id: str, day: date_type, total_hours: float,
                      exclude_id: Optional[str] = None):
        limit = settings.MAX_HOURS_PER_DAY
        if total_hours > limit:
            raise TimesheetValidationError(
                "A single timesheet cannot exceed 24 hours. "
                "Please check start time, end time, and break duration."
            )

        existing = self._day_total(db, employee_id, day, exclude_id)
        if existing + total_hours > limit:
            raise TimesheetValidationError(
                f"Total hours for {day.isoformat()} would be {existing + total_hours:.1f}h, "
                f"exceeding 24 hours. Existing: {existing:.1f}h, New: {total_hours:.1f}h."
            )

    def get(self, db: Session, timesheet_id: str) -> Timesheet:
        timesheet = db.query(Timesheet).filter(Timesheet.id == timesheet_id).first()
        if not timesheet:
            raise NotFoundError("Timesheet not found")
        return timesheet

    def get_visible(self, db: Session, timesheet_id: str, user: User) -> Timesheet:
        """
        Load a timesheet the user is allowed to read

        Readers are the owner, an admin, the owner's manager, an approver who
        can act on the timesheet's current level, or one who already decided on it.

        Raises:
            NotFoundError: If the timesheet does not exist
            PermissionDeniedError: If the user has no relationship to it
        """
        timesheet = self.get(db, timesheet_id)

        if timesheet.employee_id == user.id or user.role == UserRole.ADMIN:
            return timesheet
        if timesheet.employee and timesheet.employee.manager_id == user.id:
            return timesheet

        level = APPROVAL_LEVELS.level_for_status(timesheet.status)
        if level is not None and approval_service.can_act(level, timesheet, user):
            return timesheet
        if approval_service.has_decided(db, timesheet.id, user):
            return timesheet

        logger.warning(f"{user.email} denied read access to timesheet {timesheet.id}")
        raise PermissionDeniedError("Not allowed")

    def _ensure_owner(self, timesheet: Timesheet, user: User):
        if timesheet.employee_id != user.id and user.role != UserRole.ADMIN:
            raise PermissionDeniedError("Not allowed")

    def create(self, db: Session, employee: User, data: TimesheetCreate) -> Timesheet:
        """
        Log a new shift

        Args:
            db: Database session
            employee: Owner of the timesheet
            data: Shift details

        Returns:
            Timesheet: Draft or timesheet pending at the first approval level
        """
        total_hours, overtime_hours = calculate_hours(data.start_time, data.end_time, data.break_minutes)
        self._check_limits(db, employee.id, data.date, total_hours)

        timesheet = Timesheet(
            employee_id=employee.id,
            date=data.date,
            start_time=data.start_time,
            end_time=data.end_time,
            break_minutes=data.break_minutes,
            total_hours=total_hours,
            overtime_hours=overtime_hours,
            description=data.description,
            project=data.project,
            status=DRAFT_STATUS if data.is_draft else APPROVAL_LEVELS.initial_status(),
        )
        db.add(timesheet)
        db.commit()
        db.refresh(timesheet)

        logger.info(f"Timesheet {timesheet.id} created by {employee.email} ({total_hours}h, {timesheet.status})")
        return timesheet

    def update(self, db: Session, timesheet_id: str, user: User, data: TimesheetUpdate) -> Timesheet:
        """Edit a draft or rejected timesheet"""
        timesheet = self.get(db, timesheet_id)
        self._ensure_owner(timesheet, user)

        if timesheet.status not in EDITABLE_STATUSES:
            raise InvalidTransitionError("Only draft or rejected timesheets can be edited")

        day = data.date or timesheet.date
        start_time = data.start_time or timesheet.start_time
        end_time = data.end_time or timesheet.end_time
        break_minutes = timesheet.break_minutes if data.break_minutes is None else data.break_minutes

        total_hours, overtime_hours = calculate_hours(start_time, end_time, break_minutes)
        self._check_limits(db, timesheet.employee_id, day, total_hours, exclude_id=timesheet.id)

        timesheet.date = day
        timesheet.start_time = start_time
        timesheet.end_time = end_time
        timesheet.break_minutes = break_minutes
        timesheet.total_hours = total_hours
        timesheet.overtime_hours = overtime_hours

        if data.description is not None:
            timesheet.description = data.description
        if data.project is not None:
            timesheet.project = data.project
        if data.is_draft:
            timesheet.status = DRAFT_STATUS

        db.commit()
        db.refresh(timesheet)
        logger.info(f"Timesheet {timesheet.id} updated by {user.email}")
        return timesheet

    def submit(self, db: Session, timesheet_id: str, user: User) -> Timesheet:
        """Send a draft or rejected timesheet to the first approval level"""
        timesheet = self.get(db, timesheet_id)
        self._ensure_owner(timesheet, user)

        if timesheet.status not in EDITABLE_STATUSES:
            raise InvalidTransitionError("Only draft or rejected timesheets can be submitted")

        timesheet.status = APPROVAL_LEVELS.initial_status()
        db.commit()
        db.refresh(timesheet)

        logger.info(f"Timesheet {timesheet.id} submitted by {user.email}")
        return timesheet

    def list_for_user(
        self,
        db: Session,
        user: User,
        status: Optional[str] = None,
        date_from: Optional[date_type] = None,
        date_to: Optional[date_type] = None,
    ) -> List[Timesheet]:
        """
        Timesheets visible to the user

        Employees see their own; approvers also see their level's queue,
        limited to their team on team-scoped levels; admins see everything.
        """
        query = db.query(Timesheet)

        if user.role != UserRole.ADMIN:
            awaiting = approval_service.awaiting(user)
            if awaiting is None:
                query = query.filter(Timesheet.employee_id == user.id)
            else:
                query = query.filter((Timesheet.employee_id == user.id) | awaiting)

        if status:
            query = query.filter(Timesheet.status == status)
        if date_from:
            query = query.filter(Timesheet.date >= date_from)
        if date_to:
            query = query.filter(Timesheet.date <= date_to)

        return query.order_by(Timesheet.date.desc()).all()

    def list_team(self, db: Session, user: User) -> List[Timesheet]:
        """
        Timesheets of the employees who report to the user

        Managers see their direct reports; admins see every employee's.

        Raises:
            PermissionDeniedError: If the user is neither a manager nor an admin
        """
        query = db.query(Timesheet).join(User, Timesheet.employee_id == User.id)

        if user.role == UserRole.MANAGER:
            query = query.filter(User.manager_id == user.id)
        elif user.role != UserRole.ADMIN:
            raise PermissionDeniedError("Only managers and admins can view team timesheets")

        return query.order_by(Timesheet.date.desc()).all()

    def list_own(self, db: Session, user: User) -> List[Timesheet]:
        return (
            db.query(Timesheet)
            .filter(Timesheet.employee_id == user.id)
            .order_by(Timesheet.date.desc())
            .all()
        )


# Create singleton instance
timesheet_service = TimesheetService()
