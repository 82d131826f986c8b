import random

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import create_engine

from database import SnippetStore
from main import create_app


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def store(engine):
    store = SnippetStore(engine)
    store.initialize()
    return store


@pytest.fixture
def seeded_store(engine):
    store = SnippetStore(engine, rng=random.Random(1234))
    store.initialize()
    return store


@pytest.fixture
def client(store):
    with TestClient(create_app(store)) as client:
        yield client
