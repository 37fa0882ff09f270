"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

# Ensure motiva_backend is importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(__file__))))

from motiva_backend.api.gateway import GatewayDispatcher
from motiva_backend.database import build_session_factory, init_db
from motiva_backend.server import create_app
from motiva_backend.services import TrainerAssignmentService
from motiva_backend.store import InMemoryDocumentStore, SqlDocumentStore
from motiva_backend.tests.fixtures import ADMIN, CLIENT_1, CLIENT_2, TRAINER_1, TRAINER_2, make_member


@pytest.fixture
def store():
    """Fresh in-memory document store for a test."""
    return InMemoryDocumentStore()


@pytest.fixture
def sql_store():
    """SQLAlchemy document store on a private in-memory SQLite database."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    try:
        yield SqlDocumentStore(build_session_factory(engine))
    finally:
        engine.dispose()


@pytest.fixture
def tokens(store):
    """Bearer tokens for the standard cast; trainer-1 coaches client-1."""
    cast = {
        "admin": make_member(store, ADMIN, "admin"),
        "client1": make_member(store, CLIENT_1, "client"),
        "client2": make_member(store, CLIENT_2, "client"),
        "trainer1": make_member(store, TRAINER_1, "trainer"),
        "trainer2": make_member(store, TRAINER_2, "trainer"),
        "norole": make_member(store, "member-without-role"),
    }
    TrainerAssignmentService(store).assign_client(CLIENT_1, TRAINER_1)
    return cast


@pytest.fixture
def dispatcher(store):
    return GatewayDispatcher(store)


@pytest.fixture
def client(store):
    """HTTP client against an app bound to the test store."""
    with TestClient(create_app(store)) as test_client:
        yield test_client
