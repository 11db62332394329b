"""
Authentication Service
Handles registration, authentication and authorization
"""

from datetime import datetime
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from timesheet_app.config.database import get_db
from timesheet_app.config.settings import settings
from timesheet_app.models.user import User, UserRole
from timesheet_app.schemas.user import UserRegister
from timesheet_app.utils.exceptions import RegistrationError
from timesheet_app.utils.security import verify_password, get_password_hash, create_access_token, decode_token
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


class AuthService:
    """Authentication service"""

    def authenticate_user(self, db: Session, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password

        Args:
            db: Database session
            email: Account email
            password: Password

        Returns:
            User: Authenticated user or None
        """
        user = db.query(User).filter(User.email == email.strip().lower()).first()

        if not user:
            return None

        if not verify_password(password, user.hashed_password):
            return None

        if not user.is_active:
            return None

        user.last_login = datetime.utcnow()
        db.commit()

        logger.info(f"User authenticated: {user.email}")
        return user

    def create_token(self, user: User) -> str:
        """Issue an access token for the user"""
        return create_access_token(
            data={
                "sub": user.id,
                "email": user.email,
                "role": user.role.value,
            }
        )

    def register_user(self, db: Session, data: UserRegister) -> User:
        """
        Create a self-registered account

        Args:
            db: Database session
            data: Registration payload

        Returns:
            User: Newly created user

        Raises:
            RegistrationError: On missing fields, short password, duplicate email or admin role
        """
        name = (data.name or "").strip()
        email = (data.email or "").strip().lower()
        password = data.password or ""

        if not name or not email or not password:
            raise RegistrationError("name/email/password required")

        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise RegistrationError(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters."
            )

        role = UserRole(data.role.value) if data.role else UserRole.EMPLOYEE
        if role == UserRole.ADMIN:
            raise RegistrationError("Administrator accounts cannot be self-registered")

        if db.query(User).filter(User.email == email).first():
            raise RegistrationError("Email already in use")

        user = User(
            name=name,
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            department=data.department,
            designation=data.designation,
            phone=data.phone or None,
            photo=data.photo or None,
            github=data.github or None,
            linkedin=data.linkedin or None,
            bio=data.bio or None,
        )

        if data.manager_email:
            manager = db.query(User).filter(User.email == data.manager_email.strip().lower()).first()
            if manager:
                user.manager_id = manager.id
            else:
                logger.warning(f"Manager {data.manager_email} not found while registering {email}")

        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"User registered: {user.email} ({user.role.value})")
        return user

    async def get_current_user(
        self,
        token: Optional[str] = Depends(oauth2_scheme),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Get current authenticated user from token

        Args:
            token: JWT token
            db: Database session

        Returns:
            User: Current user

        Raises:
            HTTPException: If authentication fails
        """
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No token provided",
                headers={"WWW-Authenticate": "Bearer"},
            )

        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalid",
            headers={"WWW-Authenticate": "Bearer"},
        )

        payload = decode_token(token)
        if payload is None:
            raise credentials_exception

        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception

        user = db.query(User).filter(User.id == user_id).first()
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
                headers={"WWW-Authenticate": "Bearer"},
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="User account is inactive"
            )

        return user


# Create singleton instance
auth_service = AuthService()
