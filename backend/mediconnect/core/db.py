import logging
import os

from fastapi import HTTPException
from sqlalchemy import create_engine, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import settings

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL
_url = make_url(SQLALCHEMY_DATABASE_URL)

engine_kwargs = {"pool_pre_ping": True}

# ✅ Detect database type
if _url.get_backend_name() == "sqlite":
    engine_kwargs["connect_args"] = {"check_same_thread": False}
    db_path = _url.database
    if not db_path or db_path == ":memory:":
        # One shared connection, otherwise every session sees an empty database
        engine_kwargs["poolclass"] = StaticPool
        logger.info("[DB CONFIG] Using in-memory SQLite")
    else:
        if os.path.dirname(db_path):
            os.makedirs(os.path.dirname(db_path), exist_ok=True)
        logger.info(f"[DB CONFIG] Using SQLite → {db_path}")
else:
    logger.info(f"[DB CONFIG] Using {_url.get_backend_name()} → {_url.render_as_string(hide_password=True)}")

# ✅ Engine setup
engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    """Create all tables for the registered models."""
    from .. import models  # noqa: F401  (registers mappers on Base)

    Base.metadata.create_all(bind=engine)

def reset_db():
    """Drop and recreate every table. Destroys all data."""
    from .. import models  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

def db_healthcheck():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True, None
    except Exception as e:
        return False, str(e)

def commit_or_500(db, action: str):
    """Commit the session; store failures surface as a generic 500.

    IntegrityError propagates untouched (after rollback) so callers can map
    unique-key clashes to a conflict.
    """
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"❌ Database error while trying to {action}")
        raise HTTPException(status_code=500, detail="Internal server error")
