"""
Authentication Schemas
Pydantic models for authentication requests and responses
"""

from pydantic import BaseModel
from typing import Any, Dict


class UserLogin(BaseModel):
    """Login request schema"""
    email: str
    password: str


class LoginResponse(BaseModel):
    """Token plus the public user profile"""
    token: str
    user: Dict[str, Any]
