"""
Authentication Routes
Registration, login and current user
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from timesheet_app.config.database import get_db
from timesheet_app.services.auth_service import auth_service
from timesheet_app.schemas.auth import UserLogin, LoginResponse
from timesheet_app.schemas.user import UserRegister
from timesheet_app.models.user import User
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()
router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    data: UserRegister,
    db: Session = Depends(get_db)
):
    """
    Register a new account

    Returns a token so the client may sign in straight away, although the
    browser flow redirects to the login page instead.
    """
    user = auth_service.register_user(db, data)

    return {
        "message": "Registration successful",
        "token": auth_service.create_token(user),
        "user": user.to_public_dict(),
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: UserLogin,
    db: Session = Depends(get_db)
):
    """Login with email and password"""
    if not credentials.email or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="email/password required"
        )

    user = auth_service.authenticate_user(db, credentials.email, credentials.password)

    if not user:
        logger.warning(f"Failed login for {credentials.email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    logger.info(f"User logged in: {user.email}")

    return {
        "token": auth_service.create_token(user),
        "user": user.to_public_dict(),
    }


@router.get("/me")
async def get_current_user_info(
    current_user: User = Depends(auth_service.get_current_user)
):
    """Get current user information"""
    user = current_user.to_public_dict()
    user["_id"] = current_user.id
    return {"user": user}
