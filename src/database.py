"""Database configuration and session management."""

import os
import logging
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv

from src.models import Base

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)


def _database_url() -> str:
    """Build the database URL from DATABASE_URL or PATH_DATABASE/NAME_DB."""
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    path_database = os.getenv("PATH_DATABASE")
    name_db = os.getenv("NAME_DB")
    if not path_database or not name_db:
        raise ValueError("DATABASE_URL or PATH_DATABASE and NAME_DB must be set in .env file")

    # Ensure database directory exists
    db_dir = Path(path_database)
    db_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_dir / name_db}"


DATABASE_URL = _database_url()

logger.info(f"Database URL: {DATABASE_URL}")

# Create engine
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Initialize the database by creating all tables."""
    logger.info("Initializing database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")


def seed_admin_user():
    """
    Create the admin user from ADMIN_EMAIL/ADMIN_PASSWORD on startup.

    Only creates the user if the email is not registered yet.
    """
    # Import here to avoid circular import
    from src import config
    from src.auth import TokenService
    from src.services.auth_service import AuthService
    from src.stores import UserStore

    logger.info("Checking admin user seed...")

    if not config.ADMIN_EMAIL:
        logger.warning("ADMIN_EMAIL not configured, skipping admin user seed")
        return

    if not config.ADMIN_PASSWORD:
        logger.warning("ADMIN_PASSWORD not configured, skipping admin user seed")
        return

    db = SessionLocal()
    try:
        service = AuthService(UserStore(db), TokenService(config.JWT_SECRET_KEY))
        service.ensure_admin(config.ADMIN_EMAIL, config.ADMIN_PASSWORD)
    except Exception as e:
        logger.error(f"Failed to seed admin user: {e}")
        db.rollback()
    finally:
        db.close()


def get_db():
    """
    Dependency function to get database session.

    Yields:
        Session: SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
