"""
Timesheet Schemas
"""

from pydantic import BaseModel, Field
from typing import Optional
import datetime as dt


class TimesheetCreate(BaseModel):
    """Schema for logging a shift"""
    date: dt.date
    start_time: str = Field(..., alias="startTime")
    end_time: str = Field(..., alias="endTime")
    break_minutes: int = Field(default=0, ge=0, alias="breakMinutes")
    description: Optional[str] = None
    project: Optional[str] = None
    is_draft: bool = Field(default=False, alias="isDraft")

    class Config:
        populate_by_name = True


class TimesheetUpdate(BaseModel):
    """Schema for editing a draft or rejected timesheet"""
    date: Optional[dt.date] = None
    start_time: Optional[str] = Field(default=None, alias="startTime")
    end_time: Optional[str] = Field(default=None, alias="endTime")
    break_minutes: Optional[int] = Field(default=None, ge=0, alias="breakMinutes")
    description: Optional[str] = None
    project: Optional[str] = None
    is_draft: Optional[bool] = Field(default=None, alias="isDraft")

    class Config:
        populate_by_name = True
