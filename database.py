# database.py
import os
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

Base = declarative_base()

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise RuntimeError("DATABASE_URL is not set in the environment")


def engine_kwargs(url: str) -> dict:
    """Engine options for a database URL.

    SQLite (local dev, tests) takes no pool tuning and must allow the
    connection to cross threads; everything else gets the pool knobs.
    """
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}

    # ─── Connection-pool tuning ────────────────────────────────────────
    # Override via env vars for larger setups.
    return {
        "pool_size": int(os.getenv("DB_POOL_SIZE", "5")),           # steady-state connections
        "max_overflow": int(os.getenv("DB_MAX_OVERFLOW", "10")),     # burst above pool_size
        "pool_timeout": int(os.getenv("DB_POOL_TIMEOUT", "30")),     # seconds to wait for a conn
        "pool_recycle": int(os.getenv("DB_POOL_RECYCLE", "1800")),   # recycle every 30 min
        "pool_pre_ping": True,
    }


_kwargs = engine_kwargs(DATABASE_URL)
engine = create_engine(DATABASE_URL, **_kwargs)

if "pool_size" in _kwargs:
    logger.info(
        "DB pool configured: size=%d, max_overflow=%d, recycle=%ds, pre_ping=True",
        _kwargs["pool_size"], _kwargs["max_overflow"], _kwargs["pool_recycle"],
    )

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
