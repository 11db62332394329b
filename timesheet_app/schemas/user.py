"""
User Schemas
Pydantic models for user-related requests
"""

from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class UserRoleEnum(str, Enum):
    """User role enumeration"""
    EMPLOYEE = "employee"
    MANAGER = "manager"
    HR = "hr"
    DIRECTOR = "director"
    ADMIN = "admin"


class UserRegister(BaseModel):
    """
    Registration payload

    Field names follow the browser form, so the manager reference arrives
    as ``managerEmail``. Presence and length checks happen in the service
    so that failures produce the same ``message`` body as other errors.
    """
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: Optional[UserRoleEnum] = None
    designation: Optional[str] = None
    department: Optional[str] = None
    manager_email: Optional[str] = Field(default=None, alias="managerEmail")
    photo: Optional[str] = None
    github: Optional[str] = None
    linkedin: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None

    class Config:
        populate_by_name = True
