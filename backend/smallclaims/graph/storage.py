"""Persistence adapter for case graphs.

A graph is stored as one JSON document per claim, replaced wholesale on every
save (last write wins). The transport is a small synchronous repository; the
adapter runs it off the event loop and surfaces failures as
``GraphStorageError``.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Optional, Protocol

import psycopg2
from psycopg2.extras import Json

from ..config import Settings, settings as default_settings
from ..errors import GraphStorageError
from ..schemas import Claim
from .builder import build_graph_from_claim
from .models import CaseGraph

logger = logging.getLogger(__name__)

GRAPHS_TABLE = "case_graphs"

# Mirrors db/schema.sql
GRAPHS_DDL = f"""
CREATE TABLE IF NOT EXISTS {GRAPHS_TABLE} (
    claim_id    TEXT PRIMARY KEY,
    document    JSONB NOT NULL,
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT now()
)
"""


class GraphRepository(Protocol):
    def load(self, claim_id: str) -> Optional[CaseGraph]: ...

    def save(self, graph: CaseGraph) -> None: ...


class InMemoryGraphRepository:
    """Keeps serialized documents in a dict; used for tests and local runs."""

    def __init__(self) -> None:
        self.documents: dict[str, str] = {}

    def load(self, claim_id: str) -> Optional[CaseGraph]:
        raw = self.documents.get(claim_id)
        if raw is None:
            return None
        return CaseGraph.model_validate_json(raw)

    def save(self, graph: CaseGraph) -> None:
        self.documents[graph.claim_id] = graph.model_dump_json()


class PostgresGraphRepository:
    """JSONB documents in the ``case_graphs`` table (see db/schema.sql)."""

    def __init__(self, database_url: str) -> None:
        self.database_url = database_url

    def _connect(self):
        return psycopg2.connect(self.database_url)

    def ensure_schema(self) -> None:
        conn = self._connect()
        try:
            with conn:
                with conn.cursor() as cur:
                    cur.execute(GRAPHS_DDL)
        finally:
            conn.close()

    def load(self, claim_id: str) -> Optional[CaseGraph]:
        conn = self._connect()
        try:
            with conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"SELECT document FROM {GRAPHS_TABLE} WHERE claim_id = %s",
                        (claim_id,),
                    )
                    row = cur.fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        document = row[0]
        if isinstance(document, str):
            document = json.loads(document)
        return CaseGraph.model_validate(document)

    def save(self, graph: CaseGraph) -> None:
        conn = self._connect()
        try:
            with conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO {GRAPHS_TABLE} (claim_id, document, updated_at)
                        VALUES (%s, %s, now())
                        ON CONFLICT (claim_id)
                        DO UPDATE SET document = EXCLUDED.document, updated_at = now()
                        """,
                        (graph.claim_id, Json(graph.model_dump(mode="json"))),
                    )
        finally:
            conn.close()


class GraphStore:
    def __init__(self, repository: GraphRepository) -> None:
        self.repository = repository

    async def load_graph(self, claim_id: str) -> Optional[CaseGraph]:
        try:
            graph = await asyncio.to_thread(self.repository.load, claim_id)
        except (psycopg2.Error, OSError, ValueError) as e:
            logger.error("Failed to load graph for claim %s: %s", claim_id, e)
            raise GraphStorageError("load", claim_id, e) from e
        logger.debug("Loaded graph for claim %s (found=%s)", claim_id, graph is not None)
        return graph

    async def get_or_create_graph(self, claim: Claim) -> CaseGraph:
        """Return the stored graph, or seed a new one from the claim.

        A seeded graph is not saved here; the caller persists it with
        ``save_graph`` once it has made its edits.
        """
        existing = await self.load_graph(claim.id)
        if existing is not None:
            return existing
        logger.info("No graph stored for claim %s, seeding from claim data", claim.id)
        return build_graph_from_claim(claim)

    async def save_graph(self, graph: CaseGraph) -> None:
        try:
            await asyncio.to_thread(self.repository.save, graph)
        except (psycopg2.Error, OSError) as e:
            logger.error("Failed to save graph for claim %s: %s", graph.claim_id, e)
            raise GraphStorageError("save", graph.claim_id, e) from e
        logger.info(
            "Saved graph for claim %s (%d nodes, %d edges)",
            graph.claim_id,
            len(graph.nodes),
            len(graph.edges),
        )


def create_store(config: Settings | None = None) -> GraphStore:
    config = config or default_settings
    if config.database_url:
        return GraphStore(PostgresGraphRepository(config.database_url))
    logger.warning("DATABASE_URL not set; case graphs are kept in memory only")
    return GraphStore(InMemoryGraphRepository())
