import os

# Must be set before careers.core.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["INGEST_SOURCE"] = ""
os.environ["INGEST_RETRY_DELAY"] = "0"

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402

from careers.crud.economic_regions import upsert_economic_region  # noqa: E402
from careers.crud.unit_groups import upsert_unit_group  # noqa: E402
from careers.db.base import create_all  # noqa: E402
from careers.db.session import make_engine, make_session_factory  # noqa: E402


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", echo=False)
    create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded(db):
    """Software engineers in Toronto, the usual starting point."""
    upsert_unit_group(db, "1234", "Software engineers")
    upsert_economic_region(db, "5920", "Toronto")
    return db


@pytest.fixture
def release():
    return datetime(2024, 1, 1)
