from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for all models
Base = declarative_base()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create the engine backing both stores.

    An in-memory SQLite database only lives as long as its connection,
    so it is pinned to a single shared connection with StaticPool.
    check_same_thread=False is needed because FastAPI runs sync handlers
    in a threadpool.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=echo, **kwargs)
    return create_engine(database_url, echo=echo)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine):
    """
    Initialize database schema.
    Creates all tables defined in models.
    Call this on application startup.
    """
    # Register models on Base.metadata before create_all
    from intranet import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    """
    Dependency that provides database session to route handlers.
    The session factory belongs to the running app, so each app instance
    has its own stores. Ensures session is properly closed after request.

    All sessions share the single in-memory connection, and closing one
    rolls that connection back, so units of work are serialized on
    app.state.db_lock. A plain Lock is used because FastAPI may run the
    setup and teardown of a sync generator dependency on different threads.
    """
    lock = request.app.state.db_lock
    lock.acquire()
    try:
        db = request.app.state.session_factory()
        try:
            yield db
        finally:
            db.close()
    finally:
        lock.release()
