"""
Database configuration and session management
"""
import logging
import time
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tipsplit.core.config import get_settings
from tipsplit.core.logging_config import LoggingConfig
from tipsplit.core.metrics import db_queries_total, db_query_duration_seconds

# Lazy initialization - don't create engine at module level
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None

# Base class for models (can be created immediately)
Base = declarative_base()

_TABLE_KEYWORDS = {
    "select": "FROM",
    "insert": "INTO",
    "delete": "FROM",
}


def _statement_target(statement: str):
    """Return (operation, table) for a SQL statement, best effort"""
    words = statement.strip().split()
    if not words:
        return "unknown", "unknown"
    operation = words[0].lower()
    table = "unknown"
    if operation == "update" and len(words) > 1:
        table = words[1]
    elif operation in _TABLE_KEYWORDS:
        keyword = _TABLE_KEYWORDS[operation]
        for i, word in enumerate(words[:-1]):
            if word.upper() == keyword:
                table = words[i + 1]
                break
    return operation, table.strip(';').strip('"').lower()


def _setup_db_metrics(engine: Engine):
    """Setup SQLAlchemy event listeners for database metrics"""

    @event.listens_for(engine, "before_cursor_execute")
    def receive_before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault('query_start_time', []).append(time.time())

    @event.listens_for(engine, "after_cursor_execute")
    def receive_after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        if not conn.info.get('query_start_time'):
            return
        duration = time.time() - conn.info['query_start_time'].pop()
        operation, table = _statement_target(statement)
        db_queries_total.labels(operation=operation, table=table).inc()
        db_query_duration_seconds.labels(operation=operation, table=table).observe(duration)


def get_engine() -> Engine:
    """Get or create database engine (lazy initialization)"""
    global _engine
    if _engine is None:
        settings = get_settings()
        LoggingConfig.configure()

        if settings.is_sqlite:
            # Requests are served from a threadpool; the session is not shared concurrently
            engine_kwargs = {
                "connect_args": {"check_same_thread": False, "timeout": 5},
            }
        else:
            engine_kwargs = {
                "pool_size": settings.database_pool_size,
                "max_overflow": settings.database_max_overflow,
                "pool_pre_ping": True,
            }

        _engine = create_engine(
            settings.database_url,
            echo=settings.log_sqlalchemy,
            **engine_kwargs
        )

        sqlalchemy_logger = logging.getLogger("sqlalchemy.engine")
        if not settings.log_sqlalchemy:
            sqlalchemy_logger.setLevel(logging.WARNING)
            sqlalchemy_logger.propagate = False

        _setup_db_metrics(_engine)

    return _engine


def get_session_local() -> sessionmaker:
    """Get or create session factory (lazy initialization)"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal


def __getattr__(name):
    """Expose engine and SessionLocal as lazily created module attributes"""
    if name == 'engine':
        return get_engine()
    elif name == 'SessionLocal':
        return get_session_local()
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")


def init_db() -> None:
    """Create all tables known to the metadata (development and tests)"""
    import tipsplit.models  # noqa: F401

    Base.metadata.create_all(bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
