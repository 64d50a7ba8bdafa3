"""
Pytest fixtures for the receipt tracker tests.

Provides a store seeded with the demo branches and a fake Supabase client.
"""

import pytest

import data_integrator
from domain.models import User, UserRole
from services.store import ReceiptStore


@pytest.fixture
def store():
    """Demo data: branches 2 (Megamall), 3 (Seaside Cebu), 4 (SM Davao)."""
    return ReceiptStore.seeded()


@pytest.fixture
def empty_store():
    s = ReceiptStore()
    s.users.append(User(id="1", username="CW@Admin", role=UserRole.ADMIN))
    s.users.append(User(id="br_1", username="new_br", role=UserRole.BRANCH, branch_name="Glorietta", company="PMCI"))
    s.id_counter = 1
    return s


class FakeResponse:
    def __init__(self, data=None, error=None):
        self.data = data
        self.error = error


class FakeQuery:
    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name
        self._op = None
        self._payload = None

    def select(self, *_):
        self._op = "select"
        return self

    def upsert(self, rows, on_conflict=None):
        self._op = "upsert"
        self._payload = rows
        self.client.conflicts[self.table_name] = on_conflict
        return self

    def execute(self):
        if self.table_name in self.client.failing:
            raise ConnectionError("connection refused")
        if self._op == "select":
            return FakeResponse(list(self.client.tables.get(self.table_name, [])))
        self.client.tables.setdefault(self.table_name, []).extend(self._payload)
        return FakeResponse(self._payload)


class FakeSupabase:
    """Just enough of supabase.Client for data_integrator."""

    def __init__(self):
        self.tables = {}
        self.conflicts = {}
        self.failing = set()

    def schema(self, _name):
        return self

    def table(self, table_name):
        return FakeQuery(self, table_name)


@pytest.fixture
def fake_supabase(monkeypatch):
    client = FakeSupabase()
    monkeypatch.setattr(data_integrator, "get_client", lambda: client)
    return client
