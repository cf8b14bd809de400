# /app/db/database.py

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from app.core.config import get_database_url

# The database URL comes from the environment; SQLite is the local default.
DATABASE_URL = get_database_url()


def build_engine(database_url: str):
    """
    Creates an engine for the given URL.
    The 'check_same_thread' argument and the foreign-key pragma only apply to SQLite.
    """
    is_sqlite = database_url.startswith("sqlite")
    engine_args = {"connect_args": {"check_same_thread": False}} if is_sqlite else {}
    new_engine = create_engine(database_url, **engine_args)

    if is_sqlite:
        @event.listens_for(new_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


engine = build_engine(DATABASE_URL)

# Each instance of SessionLocal is a database session.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency to get a DB session. This is used by the API routers.
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
