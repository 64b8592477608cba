"""
Database connection and initialization for the contact store.

- Ensures the database directory exists.
- Configures the SQLAlchemy engine and session maker.
- Provides `init_db()` to create all tables defined in the ORM models.
- Provides `get_db()` to hand a session to a FastAPI route and close it afterwards.
"""

import os

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

import pimbridge.config as config
from shared.models.pim import Base

db_dir = os.path.dirname(config.CONTACTS_DB)
if db_dir:
    os.makedirs(db_dir, exist_ok=True)
DB_URL = f"sqlite:///{config.CONTACTS_DB}"

engine = create_engine(DB_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def init_db():
    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
