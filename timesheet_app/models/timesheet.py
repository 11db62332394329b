"""
Timesheet Model
A single worked shift submitted by an employee for multi-level approval
"""

from sqlalchemy import Column, String, Date, DateTime, Float, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime

from timesheet_app.config.approval_levels import APPROVAL_LEVELS
from timesheet_app.config.database import Base
from timesheet_app.utils.helpers import new_id


class Timesheet(Base):
    """Timesheet model"""
    __tablename__ = "timesheets"

    id = Column(String(32), primary_key=True, default=new_id)
    employee_id = Column(String(32), ForeignKey("users.id"), nullable=False, index=True)

    # Shift
    date = Column(Date, nullable=False, index=True)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    break_minutes = Column(Integer, default=0)
    total_hours = Column(Float, default=0.0)
    overtime_hours = Column(Float, default=0.0)

    description = Column(Text, nullable=True)
    project = Column(String, nullable=True)

    # Workflow; plain string so it always matches the approval level registry
    status = Column(String(32), default=APPROVAL_LEVELS.initial_status, nullable=False, index=True)
    manager_remarks = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    employee = relationship("User", back_populates="timesheets")
    approvals = relationship("Approval", back_populates="timesheet", order_by="Approval.created_at")

    def __repr__(self):
        return f"<Timesheet {self.id} {self.date} - {self.status}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "employee_name": self.employee.name if self.employee else None,
            "date": self.date.isoformat() if self.date else None,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "break_minutes": self.break_minutes,
            "total_hours": self.total_hours,
            "overtime_hours": self.overtime_hours,
            "description": self.description,
            "project": self.project,
            "status": self.status,
            "manager_remarks": self.manager_remarks,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
