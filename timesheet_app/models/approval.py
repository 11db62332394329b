"""
Approval Model
Append-only record of one approver's decision at one level
"""

from sqlalchemy import Column, String, DateTime, Enum, ForeignKey, Text, event
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from timesheet_app.config.database import Base
from timesheet_app.utils.exceptions import ImmutableRecordError
from timesheet_app.utils.helpers import new_id


class ApprovalAction(str, enum.Enum):
    """Decision taken by an approver"""
    APPROVE = "approve"
    REJECT = "reject"


class Approval(Base):
    """Approval model"""
    __tablename__ = "approvals"

    id = Column(String(32), primary_key=True, default=new_id)

    timesheet_id = Column(String(32), ForeignKey("timesheets.id"), nullable=False, index=True)
    approver_id = Column(String(32), ForeignKey("users.id"), nullable=False)

    # Level key from the approval level registry
    level = Column(String(32), nullable=False)
    action = Column(Enum(ApprovalAction, values_callable=lambda actions: [a.value for a in actions]),
                    nullable=False)

    comments = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    timesheet = relationship("Timesheet", back_populates="approvals")
    approver = relationship("User", back_populates="approvals")

    def __repr__(self):
        return f"<Approval {self.level} - {self.action.value}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timesheet_id": self.timesheet_id,
            "approver_id": self.approver_id,
            "approver_name": self.approver.name if self.approver else None,
            "level": self.level,
            "action": self.action.value,
            "comments": self.comments,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


@event.listens_for(Approval, "before_update")
def _reject_approval_update(mapper, connection, target):
    raise ImmutableRecordError(f"Approval {target.id} is immutable")


@event.listens_for(Approval, "before_delete")
def _reject_approval_delete(mapper, connection, target):
    raise ImmutableRecordError(f"Approval {target.id} cannot be deleted")
