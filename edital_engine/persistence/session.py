"""
Database session management.
"""
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from edital_engine.config.settings import settings

from .database import Base


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    url = database_url or settings.persistence.database_url
    return create_engine(
        url,
        echo=settings.persistence.echo if echo is None else echo,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
    )


engine = create_db_engine()

SessionLocal = sessionmaker(autoflush=False, bind=engine)


def get_db():
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Optional[Engine] = None):
    """Initialize database tables."""
    Base.metadata.create_all(bind=bind or engine)
