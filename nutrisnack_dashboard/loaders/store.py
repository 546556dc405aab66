"""
Read-only query contract for the backing data store.

Every call returns a QueryResult instead of raising: query errors are caught
and logged here so that a failing sub-query degrades to an empty set for the
caller. Missing credentials are not a query error: they raise
ConfigurationError. Two implementations share the contract:

- SupabaseStore: the managed Postgres store (PostgREST selects and RPC).
- InMemoryStore: pandas-backed tables for the demo data source and tests.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

import pandas as pd

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Query:
    """A filtered select against one table or view.

    ``gte`` is an inclusive lower bound and ``lt`` an exclusive upper bound,
    per column. ``eq`` holds equality filters.
    """

    table: str
    columns: tuple[str, ...] = ()
    gte: dict[str, Any] = field(default_factory=dict)
    lt: dict[str, Any] = field(default_factory=dict)
    eq: dict[str, Any] = field(default_factory=dict)
    order_by: str | None = None
    descending: bool = False
    limit: int | None = None

    @property
    def select_clause(self) -> str:
        return ",".join(self.columns) if self.columns else "*"


@dataclass(frozen=True)
class QueryResult:
    data: list[dict] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class DataStore(Protocol):
    def select(self, query: Query) -> QueryResult: ...

    def rpc(self, procedure: str, params: dict | None = None) -> QueryResult: ...


class SupabaseStore:
    """Query contract backed by a supabase-py client."""

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            from .client import get_supabase_client

            self._client = get_supabase_client()
        return self._client

    def select(self, query: Query) -> QueryResult:
        client = self.client
        try:
            request = client.table(query.table).select(query.select_clause)
            for column, value in query.gte.items():
                request = request.gte(column, value)
            for column, value in query.lt.items():
                request = request.lt(column, value)
            for column, value in query.eq.items():
                request = request.eq(column, value)
            if query.order_by:
                request = request.order(query.order_by, desc=query.descending)
            if query.limit is not None:
                request = request.limit(query.limit)
            response = request.execute()
        except Exception as e:
            logger.exception("Select on '%s' failed", query.table)
            return QueryResult(error=str(e) or type(e).__name__)

        rows = response.data or []
        logger.info("Fetched %d rows from %s", len(rows), query.table)
        return QueryResult(data=list(rows))

    def rpc(self, procedure: str, params: dict | None = None) -> QueryResult:
        client = self.client
        try:
            response = client.rpc(procedure, params or {}).execute()
        except Exception as e:
            logger.warning("Procedure '%s' failed: %s", procedure, e)
            return QueryResult(error=str(e) or type(e).__name__)

        rows = response.data or []
        logger.info("Procedure %s returned %d rows", procedure, len(rows))
        return QueryResult(data=list(rows))


class InMemoryStore:
    """Query contract over in-memory DataFrames.

    Date and timestamp columns are kept as ISO strings, as the store returns
    them, so range filters compare lexicographically.
    """

    def __init__(
        self,
        tables: dict[str, pd.DataFrame] | None = None,
        procedures: dict[str, Callable[[], list[dict]]] | None = None,
    ):
        self.tables = dict(tables or {})
        self.procedures = dict(procedures or {})

    def select(self, query: Query) -> QueryResult:
        if query.table not in self.tables:
            logger.warning("Unknown table '%s'", query.table)
            return QueryResult(error=f"relation '{query.table}' does not exist")

        df = self.tables[query.table]
        missing = [c for c in (*query.columns, *query.gte, *query.lt, *query.eq) if c not in df.columns]
        if missing:
            logger.warning("Unknown columns %s on '%s'", missing, query.table)
            return QueryResult(error=f"column(s) {missing} do not exist")

        mask = pd.Series(True, index=df.index)
        for column, value in query.gte.items():
            mask &= df[column] >= value
        for column, value in query.lt.items():
            mask &= df[column] < value
        for column, value in query.eq.items():
            mask &= df[column] == value
        result = df[mask]

        if query.order_by:
            result = result.sort_values(query.order_by, ascending=not query.descending, kind="stable")
        if query.limit is not None:
            result = result.head(query.limit)
        if query.columns:
            result = result[list(query.columns)]

        return QueryResult(data=result.to_dict(orient="records"))

    def rpc(self, procedure: str, params: dict | None = None) -> QueryResult:
        func = self.procedures.get(procedure)
        if func is None:
            logger.warning("Procedure '%s' is not registered", procedure)
            return QueryResult(error=f"function {procedure}() does not exist")
        try:
            rows = func(**(params or {}))
        except Exception as e:
            logger.warning("Procedure '%s' failed: %s", procedure, e)
            return QueryResult(error=str(e) or type(e).__name__)
        return QueryResult(data=list(rows))
