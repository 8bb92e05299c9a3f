"""
Shared pytest fixtures for GlickoTR.

The rating core needs no database. Service tests run against an in-memory
SQLite database built from the ORM models, one rolled-back transaction
per test, and create their players through ``make_player``.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from glickotr.db.models import Base, Player


@pytest.fixture(scope="session")
def test_engine():
    """SQLite in-memory engine; FOR UPDATE and JSONB fall back to plain SQL/JSON."""
    return create_engine("sqlite:///:memory:", echo=False)


@pytest.fixture(scope="session")
def tables(test_engine):
    """Create the players and matches tables once per session."""
    Base.metadata.create_all(test_engine)
    yield
    Base.metadata.drop_all(test_engine)


@pytest.fixture
def db_session(test_engine, tables):
    """
    Session bound to an outer transaction that is rolled back afterwards.

    Services only flush, so nothing a test writes outlives it.
    """
    connection = test_engine.connect()
    transaction = connection.begin()

    Session = sessionmaker(bind=connection)
    session = Session()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def make_player(db_session):
    """
    Factory for stored players with an explicit rating.

    Usage:
        alice = make_player("Alice", rating=1650.0, deviation=120.0)
    """
    def _make(name, rating=1500.0, deviation=250.0, volatility=0.06):
        player = Player(
            display_name=name,
            rating_mu=rating,
            rating_phi=deviation,
            rating_sigma=volatility,
            wins=0,
            losses=0,
        )
        db_session.add(player)
        db_session.flush()
        return player

    return _make
