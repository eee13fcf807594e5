"""Test fixtures"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from questionbank.database import init_db
from questionbank.services.catalog import get_entry
from questionbank.services.repository import ItemRepository


@pytest.fixture
def engine():
    """Fresh in-memory database shared across threads"""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def repo_for(db):
    """Build an ItemRepository for an item kind"""
    return lambda kind: ItemRepository(db, get_entry(kind))
