"""
Approval Routes
Multi-level timesheet approval endpoints (manager -> HR -> director)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from timesheet_app.config.approval_levels import APPROVAL_LEVELS
from timesheet_app.config.database import get_db
from timesheet_app.services.auth_service import auth_service
from timesheet_app.services.approval_service import approval_service
from timesheet_app.services.timesheet_service import timesheet_service
from timesheet_app.schemas.approval import ApprovalDecision
from timesheet_app.models.user import User
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.get("/levels")
async def get_approval_levels():
    """Ordered approval levels and the final status"""
    return {
        "levels": APPROVAL_LEVELS.as_dicts(),
        "final_status": APPROVAL_LEVELS.final_status,
    }


@router.get("/pending")
async def get_pending_approvals(
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Timesheets waiting on the current user's approval level"""
    level = APPROVAL_LEVELS.level_for_role(current_user.role.value)

    if level is None:
        return {
            "timesheets": [],
            "count": 0,
            "message": "No approval rights"
        }

    timesheets = approval_service.pending_for(db, current_user)
    logger.info(f"{current_user.email} ({current_user.role.value}) viewing {len(timesheets)} pending approvals")

    return {
        "timesheets": [ts.to_dict() for ts in timesheets],
        "count": len(timesheets),
        "level": level.key,
    }


@router.post("/{timesheet_id}", status_code=status.HTTP_201_CREATED)
async def decide_timesheet(
    timesheet_id: str,
    decision: ApprovalDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Approve or reject a timesheet at its current level"""
    logger.info(f"User {current_user.email} attempting to {decision.action.value} timesheet {timesheet_id}")

    record = approval_service.decide_by_id(
        db, timesheet_id, current_user, decision.action, decision.comments
    )

    return {
        "approval": record.to_dict(),
        "timesheet": record.timesheet.to_dict(),
    }


@router.get("/{timesheet_id}/history")
async def get_approval_history(
    timesheet_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(auth_service.get_current_user)
):
    """Audit trail of decisions for a timesheet"""
    timesheet_service.get_visible(db, timesheet_id, current_user)
    records = approval_service.history(db, timesheet_id)
    return {
        "approvals": [record.to_dict() for record in records],
        "count": len(records),
    }
