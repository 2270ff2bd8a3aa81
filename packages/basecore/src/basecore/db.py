import functools

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from basecore.settings import get_settings

Base = declarative_base()


@functools.lru_cache()
def get_engine():
    """
    Get SQLAlchemy engine (cached).

    The engine is created lazily from DATABASE_URL so importing models never
    opens a connection.
    """
    settings = get_settings()
    connect_args = {}
    if settings.DATABASE_URL.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        echo=False,
        connect_args=connect_args,
    )


@functools.lru_cache()
def get_sessionmaker():
    """Get SQLAlchemy sessionmaker (cached)."""
    engine = get_engine()
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency generator for FastAPI to get database session.

    Yields a database session and ensures it's closed after use.
    """
    SessionLocal = get_sessionmaker()
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
