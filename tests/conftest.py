import json
import os
import tempfile

_tmp = tempfile.mkdtemp(prefix="pimbridge-tests-")
_config_path = os.path.join(_tmp, "config.json")
with open(_config_path, "w") as f:
    json.dump({"db": {"contacts": os.path.join(_tmp, "contacts.db")}, "photos": {"timeout": 2}}, f)
os.environ["PIMBRIDGE_CONFIG"] = _config_path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.models.pim import Base


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    from pimbridge.store import ContactStore
    return ContactStore(db)
