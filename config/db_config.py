import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

from models.base import Base
from models import course, user_progress  # noqa: F401  registers tables on Base.metadata

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Database Configuration
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./lingo.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")


def get_engine(database_url: str = DATABASE_URL, **kwargs):
    """Create a SQLAlchemy engine for the given URL"""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    return create_engine(database_url, echo=SQL_ECHO, future=True, **kwargs)


engine = get_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    """
    Request dependency yielding a session.
    The session is closed when the request finishes.
    """
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def create_tables(bind=None):
    """Create all tables if they don't exist"""
    bind = bind or engine
    Base.metadata.create_all(bind)
    logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
