import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from productivity_backend.constants import DEFAULT_DATABASE_URL

Base = declarative_base()


def get_database_url() -> str:
    """Get database URL from environment."""
    return os.getenv("DASHBOARD_DATABASE_URL", DEFAULT_DATABASE_URL)


def get_engine():
    """Create the database engine."""
    url = get_database_url()
    connect_args = {}
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        connect_args=connect_args,
        echo=os.getenv("DEBUG", "false").lower() == "true"
    )


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency for FastAPI routes to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
