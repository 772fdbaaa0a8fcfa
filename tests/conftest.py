"""Configuration de test pour pytest.

Fournit une base SQLite mémoire neuve par test, une application FastAPI branchée dessus et le
helper de peuplement.
"""

import os
import sys
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

# Ensure project root is on sys.path so that
# imports like `from shelter...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from shelter.api.deps import get_session  # noqa: E402
from shelter.app.main import app  # noqa: E402
from shelter.infra.repo.db import MEMORY_URL, get_engine, get_session_factory, session_scope  # noqa: E402
from shelter.infra.repo.models import Base  # noqa: E402
from tests.helpers import Seeder  # noqa: E402


@pytest.fixture
def session_factory() -> Iterator[sessionmaker]:
    """Factory de sessions sur une base SQLite mémoire créée pour le test."""
    engine = get_engine(MEMORY_URL)
    Base.metadata.create_all(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def session(session_factory) -> Iterator[Session]:
    s = session_factory()
    yield s
    s.close()


@pytest.fixture
def client(session_factory) -> Iterator[TestClient]:
    """Client HTTP dont les requêtes utilisent la base du test."""

    def _override() -> Iterator[Session]:
        with session_scope(session_factory) as s:
            yield s

    app.dependency_overrides[get_session] = _override
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)
