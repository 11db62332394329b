"""
Timesheet Routes
Logging, editing and submitting timesheets
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from timesheet_app.config.database import get_db
from timesheet_app.services.auth_service import auth_service
from timesheet_app.services.timesheet_service import timesheet_service
from timesheet_app.schemas.timesheet import TimesheetCreate, TimesheetUpdate
from timesheet_app.models.user import User
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("")
async def list_timesheets(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    date_from: Optional[date] = Query(default=None, alias="from"),
    date_to: Optional[date] = Query(default=None, alias="to"),
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """List timesheets visible to the current user"""
    timesheets = timesheet_service.list_for_user(
        db, current_user, status=status_filter, date_from=date_from, date_to=date_to
    )
    return {
        "count": len(timesheets),
        "data": [ts.to_dict() for ts in timesheets],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_timesheet(
    data: TimesheetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Log a shift, either as a draft or straight into approval"""
    timesheet = timesheet_service.create(db, current_user, data)
    return timesheet.to_dict()


@router.get("/me")
async def my_timesheets(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Current user's own timesheets"""
    return [ts.to_dict() for ts in timesheet_service.list_own(db, current_user)]


@router.get("/team/all")
async def team_timesheets(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Timesheets of the current manager's direct reports"""
    return [ts.to_dict() for ts in timesheet_service.list_team(db, current_user)]


@router.get("/{timesheet_id}")
async def get_timesheet(
    timesheet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Single timesheet with its approval trail"""
    timesheet = timesheet_service.get_visible(db, timesheet_id, current_user)
    data = timesheet.to_dict()
    data["approvals"] = [approval.to_dict() for approval in timesheet.approvals]
    return data


@router.put("/{timesheet_id}")
async def update_timesheet(
    timesheet_id: str,
    data: TimesheetUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Edit a draft or rejected timesheet"""
    timesheet = timesheet_service.update(db, timesheet_id, current_user, data)
    return timesheet.to_dict()


@router.post("/{timesheet_id}/submit")
async def submit_timesheet(
    timesheet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Send a draft or rejected timesheet to the first approval level"""
    timesheet = timesheet_service.submit(db, timesheet_id, current_user)
    return timesheet.to_dict()
