import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import config
from models import Base

logger = logging.getLogger(__name__)


def _engine_options(url):
    # SQLite is only used for local runs and tests: one shared connection so an
    # in-memory database survives across sessions.
    if url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_size": config.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_pre_ping": True,
        "connect_args": {"connect_timeout": config.DB_CONNECT_TIMEOUT},
    }


engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

if engine.url.get_backend_name() == "sqlite":
    # SQLite ignores foreign keys unless asked, MySQL (InnoDB) always enforces them
    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db():
    """Create every table that doesn't exist yet."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready (%s)", engine.url.get_backend_name())


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
