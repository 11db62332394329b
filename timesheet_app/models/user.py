"""
User Model
Represents system users with role-based access control
"""

from sqlalchemy import Column, String, Boolean, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from timesheet_app.config.database import Base
from timesheet_app.utils.helpers import new_id


class UserRole(str, enum.Enum):
    """User roles"""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    DIRECTOR = "director"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)

    role = Column(Enum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
                  default=UserRole.EMPLOYEE, nullable=False)
    manager_id = Column(String(32), ForeignKey("users.id"), nullable=True)

    # Profile
    department = Column(String, nullable=True)
    designation = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    photo = Column(Text, nullable=True)  # data URI
    github = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    bio = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    # Relationships
    manager = relationship("User", remote_side=[id])
    timesheets = relationship("Timesheet", back_populates="employee")
    approvals = relationship("Approval", back_populates="approver")

    def __repr__(self):
        return f"<User {self.email} ({self.role.value})>"

    def to_public_dict(self) -> dict:
        """Serialize the user without credentials"""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "department": self.department,
            "designation": self.designation,
            "phone": self.phone,
            "photo": self.photo,
            "github": self.github,
            "linkedin": self.linkedin,
            "bio": self.bio,
            "manager_id": self.manager_id,
        }
