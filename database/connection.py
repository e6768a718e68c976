import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.config import get_settings
from .models import Base

logger = logging.getLogger(__name__)

DATABASE_URL = get_settings().database_url


def _build_engine(url: str):
    if url.startswith("sqlite"):
        # Allow multithreaded test client usage
        return create_engine(url, connect_args={"check_same_thread": False})
    elif url.startswith("postgresql"):
        # Connection pooling and timeout settings for PostgreSQL
        return create_engine(
            url,
            pool_pre_ping=True,
            pool_recycle=300,
            connect_args={"connect_timeout": 10}
        )
    return create_engine(url)


engine = _build_engine(DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
logger.info(f"Database engine created for: {DATABASE_URL.split('://')[0]}://...")


def create_tables():
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error(f"Error creating tables: {e}")
        raise


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
