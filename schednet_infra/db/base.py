# schednet_infra/db/base.py
from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from schednet_infra.path import default_db_url

logger = logging.getLogger(__name__)

Base = declarative_base()

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def make_engine(db_url: str) -> Engine:
    return create_engine(db_url, echo=False, future=True)


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_engine() -> Engine:
    """Process-wide engine for SCHEDNET_DB_URL, built on first use."""
    global _engine
    if _engine is None:
        db_url = default_db_url()
        logger.info("Using database at: %s", db_url)
        _engine = make_engine(db_url)
    return _engine


def SessionLocal():
    global _session_factory
    if _session_factory is None:
        _session_factory = make_session_factory(get_engine())
    return _session_factory()
