"""
Supabase remote data gateway.

A thin wrapper over the Supabase client for table reads/writes and stored
procedure calls. Every call returns a GatewayResult carrying either ``data``
or ``error``, the same shape the JavaScript client hands to the mobile app.
Callers decide whether to inspect the error or ``unwrap()`` it into a
GatewayError. The gateway owns no business logic.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from supabase import Client

from application.exceptions import GatewayError

logger = logging.getLogger(__name__)


@dataclass
class GatewayResult:
    """Outcome of one gateway call: either data or an error."""
    data: Any = None
    error: Optional[GatewayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Any:
        """
        Return the data, raising the error if the call failed.

        Raises:
            GatewayError: If the backend reported an error
        """
        if self.error is not None:
            raise self.error
        return self.data


class SupabaseGateway:
    """
    Issues authenticated REST/RPC calls against a Supabase project.

    Usage:
        gateway = SupabaseGateway(create_client(url, key))
        result = gateway.select("meals", eq={"log_date": "2026-10-19"})
        if result.error:
            ...
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected)
        """
        self._client = client

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Dict[str, Any]] = None,
        ilike: Optional[Dict[str, str]] = None,
        gte: Optional[Dict[str, Any]] = None,
        lte: Optional[Dict[str, Any]] = None,
        order: Optional[Union[str, Sequence[str]]] = None,
        desc: bool = False,
        limit: Optional[int] = None,
        maybe_single: bool = False,
    ) -> GatewayResult:
        """
        Select rows from a table.

        Args:
            table: Table name
            columns: PostgREST column list
            eq: Equality filters {column: value}
            ilike: Case-insensitive pattern filters {column: pattern}
            gte: Lower bounds {column: value}, inclusive
            lte: Upper bounds {column: value}, inclusive
            order: Column, or columns in priority order, to sort by
            desc: Sort descending on every order column
            limit: Maximum rows
            maybe_single: Return the first row (or None) instead of a list
        """
        def build():
            query = self._client.table(table).select(columns)
            for column, value in (eq or {}).items():
                query = query.eq(column, value)
            for column, pattern in (ilike or {}).items():
                query = query.ilike(column, pattern)
            for column, value in (gte or {}).items():
                query = query.gte(column, value)
            for column, value in (lte or {}).items():
                query = query.lte(column, value)
            for column in ([order] if isinstance(order, str) else order or []):
                query = query.order(column, desc=desc)
            if maybe_single:
                query = query.limit(1)
            elif limit is not None:
                query = query.limit(limit)
            return query

        result = self._execute(f"select {table}", build)
        if result.ok and maybe_single:
            rows = result.data or []
            result.data = rows[0] if rows else None
        return result

    def insert(
        self,
        table: str,
        rows: Union[Dict[str, Any], List[Dict[str, Any]]],
        *,
        single: bool = False,
    ) -> GatewayResult:
        """
        Insert one or more rows and return the inserted representation.

        Args:
            table: Table name
            rows: A row or a list of rows
            single: Return the first inserted row instead of a list
        """
        result = self._execute(
            f"insert {table}",
            lambda: self._client.table(table).insert(rows),
        )
        if result.ok and single:
            inserted = result.data or []
            if not inserted:
                result.error = GatewayError(f"insert {table} returned no rows")
                result.data = None
            else:
                result.data = inserted[0]
        return result

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        *,
        eq: Dict[str, Any],
    ) -> GatewayResult:
        """Update rows matching all equality filters."""
        def build():
            query = self._client.table(table).update(values)
            for column, value in eq.items():
                query = query.eq(column, value)
            return query

        return self._execute(f"update {table}", build)

    def delete(self, table: str, *, eq: Dict[str, Any]) -> GatewayResult:
        """Delete rows matching all equality filters."""
        def build():
            query = self._client.table(table).delete()
            for column, value in eq.items():
                query = query.eq(column, value)
            return query

        return self._execute(f"delete {table}", build)

    def rpc(self, function: str, params: Optional[Dict[str, Any]] = None) -> GatewayResult:
        """Invoke a stored procedure."""
        return self._execute(
            f"rpc {function}",
            lambda: self._client.rpc(function, params or {}),
        )

    def _execute(self, description: str, build: Callable[[], Any]) -> GatewayResult:
        try:
            response = build().execute()
        except Exception as e:
            message = getattr(e, "message", None) or str(e)
            code = getattr(e, "code", None)
            logger.error(f"Supabase {description} failed: {message}")
            return GatewayResult(
                error=GatewayError(message, code=str(code) if code is not None else None)
            )

        data = response.data if response is not None else None
        return GatewayResult(data=data)
