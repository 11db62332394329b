"""
Database Configuration
SQLAlchemy engine, session factory and declarative base
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from timesheet_app.config.settings import settings


def build_engine(database_url: str):
    """
    Create an engine for the given connection string

    Args:
        database_url: SQLAlchemy connection URL

    Returns:
        Engine: Configured SQLAlchemy engine
    """
    if database_url.startswith("sqlite"):
        # SQLite connections are shared across the request threadpool
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before use
        pool_recycle=300,
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """Yield a database session and close it when the request ends"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
