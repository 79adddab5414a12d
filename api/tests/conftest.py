import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from vocadeck.core.context import RequestContext
from vocadeck.core.database import get_store, init_db
from vocadeck.core.record_store import SqlRecordStore
from vocadeck.main import app
from vocadeck.services.card_set_service import create_card_set
from vocadeck.services.review_service import ReviewAccumulator
from vocadeck.services.study_session_service import StudySessionEngine


class FakeClock:
    """Deterministic clock that advances one second per call."""

    def __init__(self, start=datetime(2025, 1, 6, 9, 0, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    return SqlRecordStore(engine)


@pytest.fixture
def file_store(tmp_path):
    """Store over a file database, for tests that write from several threads."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'vocadeck-test.db'}",
        connect_args={'check_same_thread': False, 'timeout': 30},
    )
    init_db(engine)
    yield SqlRecordStore(engine)
    engine.dispose()


@pytest.fixture
def ctx():
    return RequestContext(user_id='user-1')


@pytest.fixture
def other_ctx():
    return RequestContext(user_id='user-2')


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def accumulator(store, clock):
    return ReviewAccumulator(store, clock=clock)


@pytest.fixture
def session_engine(store, accumulator, clock):
    return StudySessionEngine(store, accumulator=accumulator, rng=random.Random(42), clock=clock)


@pytest.fixture
def card_set(store, ctx):
    return create_card_set(store, ctx, 'Basics', 'First words')


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    return {'X-User-Id': 'user-1'}
