"""
Shared pytest fixtures for the Navigator Profiles test suite.

The KDF runs with the minimum accepted iteration count to keep the suite
fast; every other setting uses the defaults.
"""
import pytest
import pytest_asyncio

from navigator_profiles.storage import MemoryTokenStore
from navigator_profiles.vault import VaultConfig, enroll_profiles


ALICE = {
    'name': 'Alice',
    'email': 'alice@example.com',
    'api_key': 'sk-alice-0001',
    'limits': {'daily': 10, 'tags': ['a', 'b']},
}

BOB = {
    'name': 'Bob',
    'email': 'bob@example.com',
    'api_key': 'sk-bob-0002',
    'active': False,
}


@pytest.fixture
def config():
    """Fast vault configuration."""
    return VaultConfig(kdf_iterations=1000)


@pytest.fixture
def token_store():
    """In-memory token store shared by every vault built in one test."""
    return MemoryTokenStore()


@pytest_asyncio.fixture
async def profiles(config):
    """Two profiles enrolled under passwords "p1" (Alice) and "p2" (Bob)."""
    return await enroll_profiles([('p1', ALICE), ('p2', BOB)], config)
