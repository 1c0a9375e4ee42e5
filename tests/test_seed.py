"""Unit tests for directory/seed.py -- demo data is created once."""

import pytest

from auth.models import Role
from auth.store import UserStore
from directory.seed import DEMO_BUSINESSES, DEMO_OWNERS, DEMO_PASSWORD, seed_demo_data
from directory.store import DirectoryStore


@pytest.fixture
def directory():
    store = DirectoryStore("sqlite:///:memory:")
    yield store
    store.close()


def test_seed_creates_owners_and_businesses(user_store: UserStore, directory, credentials):
    created = seed_demo_data(user_store, directory, credentials)

    assert created == len(DEMO_BUSINESSES)
    assert directory.count_businesses() == len(DEMO_BUSINESSES)
    assert user_store.count_users() == len(DEMO_OWNERS)
    john = user_store.get_by_email("john@coffee.com")
    assert john.role is Role.BUSINESS_OWNER
    assert credentials.authenticate(user_store, "john@coffee.com", DEMO_PASSWORD) is not None
    # Round-robin: every demo owner gets at least one listing.
    owners = {b.owner_id for b in directory.list_businesses()}
    assert len(owners) == len(DEMO_OWNERS)


def test_seed_skips_populated_directory(user_store: UserStore, directory, credentials):
    seed_demo_data(user_store, directory, credentials)
    assert seed_demo_data(user_store, directory, credentials) == 0
    assert directory.count_businesses() == len(DEMO_BUSINESSES)
