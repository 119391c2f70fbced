"""Tests for graph persistence."""

import asyncio
import json

import psycopg2
import pytest

from smallclaims.config import Settings
from smallclaims.errors import GraphStorageError
from smallclaims.graph import builder
from smallclaims.graph import storage
from smallclaims.graph.storage import (
    GraphStore,
    InMemoryGraphRepository,
    PostgresGraphRepository,
    create_store,
)


class FakeCursor:
    def __init__(self, db):
        self.db = db
        self.row = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params=None):
        self.db.statements.append(sql)
        if self.db.fail:
            raise psycopg2.OperationalError("connection refused")
        if sql.strip().startswith("SELECT"):
            doc = self.db.rows.get(params[0])
            # JSONB comes back already decoded, or as text for some drivers
            self.row = (doc,) if doc is not None else None
        elif "INSERT" in sql:
            claim_id, document = params
            self.db.rows[claim_id] = document.adapted

    def fetchone(self):
        return self.row


class FakeConnection:
    def __init__(self, db):
        self.db = db
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return FakeCursor(self.db)

    def close(self):
        self.closed = True
        self.db.closed += 1


class FakeDatabase:
    def __init__(self):
        self.rows = {}
        self.statements = []
        self.fail = False
        self.closed = 0

    def connect(self, url):
        return FakeConnection(self)


@pytest.fixture
def fake_db(monkeypatch) -> FakeDatabase:
    db = FakeDatabase()
    monkeypatch.setattr(storage.psycopg2, "connect", db.connect)
    return db


def test_get_or_create_seeds_without_saving(memory_store, full_claim):
    """Test a missing graph is seeded from the claim but not persisted."""
    graph = asyncio.run(memory_store.get_or_create_graph(full_claim))
    assert graph.claim_id == full_claim.id
    assert len(graph.nodes) == 6
    assert memory_store.repository.documents == {}


def test_get_or_create_is_idempotent(memory_store, full_claim):
    """Test repeated calls before any save return equal graphs."""
    first = asyncio.run(memory_store.get_or_create_graph(full_claim))
    second = asyncio.run(memory_store.get_or_create_graph(full_claim))
    assert first.model_dump() == second.model_dump()


def test_save_then_load_round_trip(memory_store, full_claim):
    """Test a saved graph comes back with the same nodes and edges."""
    graph = asyncio.run(memory_store.get_or_create_graph(full_claim))
    graph = builder.link_evidence(graph, "evidence_ev1", "event_seed_0")
    asyncio.run(memory_store.save_graph(graph))

    loaded = asyncio.run(memory_store.get_or_create_graph(full_claim))
    assert set(loaded.nodes) == set(graph.nodes)
    assert {(e.id, e.source, e.target, e.kind) for e in loaded.edges} == {
        (e.id, e.source, e.target, e.kind) for e in graph.edges
    }
    assert loaded.nodes["demand_seed_0"].data.amount_nis == 5_000


def test_save_is_last_write_wins(memory_store):
    g1 = builder.add_demand(builder.create_empty_graph("c"), "First")
    g2 = builder.add_demand(builder.create_empty_graph("c"), "Second")
    asyncio.run(memory_store.save_graph(g1))
    asyncio.run(memory_store.save_graph(g2))
    loaded = asyncio.run(memory_store.load_graph("c"))
    assert [n.data.description for n in loaded.nodes.values()] == ["Second"]


def test_load_missing_returns_none(memory_store):
    assert asyncio.run(memory_store.load_graph("unknown")) is None


def test_corrupt_document_raises_storage_error():
    """Test an unreadable document surfaces as a storage error."""
    repo = InMemoryGraphRepository()
    repo.documents["c"] = "{not json"
    store = GraphStore(repo)
    with pytest.raises(GraphStorageError) as exc_info:
        asyncio.run(store.load_graph("c"))
    assert exc_info.value.operation == "load"
    assert exc_info.value.claim_id == "c"


def test_postgres_round_trip(fake_db, full_claim):
    """Test the Postgres repository upserts and reads back JSONB documents."""
    store = GraphStore(PostgresGraphRepository("postgresql://fake"))
    graph = builder.build_graph_from_claim(full_claim)
    asyncio.run(store.save_graph(graph))

    assert "ON CONFLICT" in fake_db.statements[-1]
    assert isinstance(fake_db.rows[full_claim.id], dict)

    loaded = asyncio.run(store.load_graph(full_claim.id))
    assert loaded.model_dump() == graph.model_dump()
    assert fake_db.closed == 2


def test_postgres_accepts_text_documents(fake_db):
    graph = builder.add_event(builder.create_empty_graph("c"), "Paid")
    fake_db.rows["c"] = json.dumps(graph.model_dump(mode="json"))
    loaded = PostgresGraphRepository("postgresql://fake").load("c")
    assert loaded.model_dump() == graph.model_dump()


def test_postgres_failure_wrapped(fake_db):
    """Test driver errors are wrapped and the connection is closed."""
    fake_db.fail = True
    store = GraphStore(PostgresGraphRepository("postgresql://fake"))

    with pytest.raises(GraphStorageError) as exc_info:
        asyncio.run(store.save_graph(builder.create_empty_graph("c")))
    assert isinstance(exc_info.value.original_exception, psycopg2.Error)
    assert exc_info.value.to_dict()["operation"] == "save"

    with pytest.raises(GraphStorageError):
        asyncio.run(store.load_graph("c"))
    assert fake_db.closed == 2


def test_ensure_schema(fake_db):
    PostgresGraphRepository("postgresql://fake").ensure_schema()
    assert "CREATE TABLE IF NOT EXISTS case_graphs" in fake_db.statements[-1]


def test_create_store_selects_repository():
    assert isinstance(create_store(Settings(database_url="")).repository, InMemoryGraphRepository)
    pg = create_store(Settings(database_url="postgresql://fake"))
    assert isinstance(pg.repository, PostgresGraphRepository)
