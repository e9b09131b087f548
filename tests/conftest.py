"""
Shared fixtures: an in-memory SQLite database and a seeded random source.
"""

import numpy as np
import pytest

from floatchat.database import connection
from floatchat.database.connection import DatabaseManager
from floatchat.database.gateway import OceanDataGateway
from floatchat.ingestion.sample_files import seed_sample_data


class FixedRandom:
    """Random source that always returns the midpoint, so jitter is zero"""

    def random(self, size=None):
        if size is None:
            return 0.5
        return np.full(size, 0.5)


@pytest.fixture
def db(monkeypatch):
    manager = DatabaseManager("sqlite://", echo=False)
    manager.create_tables()
    # Code that falls back to the global manager uses the test database too
    monkeypatch.setattr(connection, "db_manager", manager)
    yield manager
    manager.drop_tables()
    manager.engine.dispose()


@pytest.fixture
def gateway(db):
    return OceanDataGateway(db)


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def fixed_rng():
    return FixedRandom()


@pytest.fixture
def seeded_gateway(gateway, rng):
    seed_sample_data(gateway.db, rng=rng)
    return gateway
