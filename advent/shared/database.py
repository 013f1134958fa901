"""
Database configuration and session management

Basic SQLAlchemy setup shared by the services. Models live in each service
package; this module only provides the engine, sessions and declarative base.
"""

import os
from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool

# Get database URL from environment variable
DATABASE_URL = os.getenv("DATABASE_URL", "postgresql+psycopg2://advent_user:changeme@db:5432/advent_db")

# SQLite connections are opened in the request threadpool, not the creating thread
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Using NullPool for better compatibility with containerized environments
engine = create_engine(
    DATABASE_URL,
    poolclass=NullPool,
    connect_args=connect_args,
    echo=False,  # Set to True for SQL query logging during development
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for ORM models
Base = declarative_base()


def get_db():
    """
    Dependency injection for database sessions
    Usage in FastAPI endpoints:

    @router.get("/endpoint")
    def endpoint(db: Session = Depends(get_db)):
        # use db here
        pass
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> bool:
    """
    Test database connectivity
    Returns True if connection successful, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
