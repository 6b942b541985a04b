"""
Database configuration and initialization
"""
from typing import Optional

import redis
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from config import settings
from utils.logging import get_logger

logger = get_logger(__name__)

# SQLAlchemy setup
engine = create_engine(settings.database.sqlalchemy_url, echo=settings.app.debug)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# Redis setup
redis_client = redis.from_url(settings.database.redis_url, decode_responses=True)


def get_db():
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_redis() -> Optional[redis.Redis]:
    """Get Redis client"""
    return redis_client


def init_db():
    """Initialize database tables"""
    try:
        logger.info("Initializing database...")

        # Import all models to ensure they're registered
        from models import jira, master_data, team  # noqa: F401

        Base.metadata.create_all(bind=engine)

        logger.info("Database initialized successfully")

    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise


def check_connections() -> dict:
    """Check database and cache connectivity"""
    status = {"database": False, "redis": False}

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        status["database"] = True
    except Exception as e:
        logger.error("Database connection test failed", error=str(e))

    try:
        redis_client.ping()
        status["redis"] = True
    except redis.RedisError as e:
        logger.warning("Redis connection test failed", error=str(e))

    return status
