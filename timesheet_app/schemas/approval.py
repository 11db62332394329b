"""
Approval Schemas
Pydantic models for approval workflow
"""

from pydantic import BaseModel
from typing import Optional

from timesheet_app.models.approval import ApprovalAction


class ApprovalDecision(BaseModel):
    """Schema for approving or rejecting a timesheet"""
    action: ApprovalAction
    comments: Optional[str] = None
