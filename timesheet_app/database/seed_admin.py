"""
Admin Seeding Script
Ensures an administrator account exists. Safe to run repeatedly.

Usage:
    DATABASE_URL=postgresql://... python -m timesheet_app.database.seed_admin
    MONGODB_URI=postgresql://... python -m timesheet_app.database.seed_admin
"""

import sys
from typing import Optional

from sqlalchemy.orm import sessionmaker

from timesheet_app.config.settings import settings
from timesheet_app.config.database import Base, build_engine
from timesheet_app.models.user import User, UserRole
from timesheet_app.models.timesheet import Timesheet  # noqa: F401  (registers mapper)
from timesheet_app.models.approval import Approval  # noqa: F401  (registers mapper)
from timesheet_app.utils.exceptions import ConfigurationError
from timesheet_app.utils.security import get_password_hash
from timesheet_app.utils.logger import setup_logger

logger = setup_logger()


def seed_admin(database_url: Optional[str], email: str, password: str, name: str = "Admin") -> bool:
    """
    Create the administrator account unless one with the email exists

    Args:
        database_url: Connection string
        email: Seed admin email
        password: Seed admin password (stored hashed)
        name: Display name

    Returns:
        bool: True if an account was created, False if it already existed

    Raises:
        ConfigurationError: If no connection string is configured
    """
    if not database_url:
        raise ConfigurationError("DATABASE_URL (or MONGODB_URI) not set. Create .env with your database URL")

    engine = build_engine(database_url)
    try:
        Base.metadata.create_all(bind=engine)
        SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        db = SessionLocal()
        try:
            email = email.strip().lower()
            if db.query(User).filter(User.email == email).first():
                logger.info(f"Admin already exists: {email}")
                return False

            user = User(
                name=name,
                email=email,
                hashed_password=get_password_hash(password),
                role=UserRole.ADMIN,
            )
            db.add(user)
            db.commit()
            logger.info(f"Created admin user: {user.email}")
            return True
        finally:
            db.close()
    finally:
        engine.dispose()


def run(database_url: Optional[str] = None, email: Optional[str] = None, password: Optional[str] = None) -> int:
    """
    Seed the admin account and return the process exit code

    Returns:
        int: 0 on success or when the account exists, 1 on any failure
    """
    try:
        seed_admin(
            database_url if database_url is not None else settings.DATABASE_URL,
            email or settings.SEED_ADMIN_EMAIL,
            password or settings.SEED_ADMIN_PASSWORD,
            settings.SEED_ADMIN_NAME,
        )
        return 0
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    except Exception:
        logger.exception("Admin seeding failed")
        return 1


if __name__ == "__main__":
    sys.exit(run())
