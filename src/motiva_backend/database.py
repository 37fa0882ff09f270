import logging
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from motiva_backend.model import Base
from motiva_backend.settings import settings

logger = logging.getLogger(__name__)

_database_options = {
    "pool_pre_ping": True,
    "pool_recycle": 300
}

def build_engine(url: Optional[str] = None) -> Engine:
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, pool_pre_ping=True)
    return create_engine(url, pool_size=10, max_overflow=5, pool_timeout=30, **_database_options)

def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

def init_db(engine: Engine) -> None:
    Base.metadata.create_all(engine)

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

def get_session_factory() -> sessionmaker:
    global _engine, _SessionLocal
    if _SessionLocal is None:
        _engine = build_engine()
        init_db(_engine)
        _SessionLocal = build_session_factory(_engine)
        logger.info("Document database ready at %s", _engine.url.render_as_string(hide_password=True))
    return _SessionLocal
