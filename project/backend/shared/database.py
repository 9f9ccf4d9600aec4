"""
Database client.

Async wrapper around the Supabase (PostgREST) client.
"""

import asyncio
from functools import partial
from typing import Any, Optional

from supabase import Client, create_client

from shared.config import settings
from shared.logging import get_logger

logger = get_logger(__name__)


class AsyncTableQueryBuilder:
    """
    Chainable query builder whose execute() is awaitable.

    The Supabase client is synchronous, so execute() runs in the default
    executor to keep the event loop free.
    """

    def __init__(self, query: Any):
        self._query = query

    def _chain(self, method: str, *args, **kwargs) -> "AsyncTableQueryBuilder":
        return AsyncTableQueryBuilder(getattr(self._query, method)(*args, **kwargs))

    def select(self, *columns: str, count: Optional[str] = None) -> "AsyncTableQueryBuilder":
        if count:
            return self._chain("select", *columns, count=count)
        return self._chain("select", *columns)

    def insert(self, data: Any) -> "AsyncTableQueryBuilder":
        return self._chain("insert", data)

    def update(self, data: Any) -> "AsyncTableQueryBuilder":
        return self._chain("update", data)

    def eq(self, column: str, value: Any) -> "AsyncTableQueryBuilder":
        return self._chain("eq", column, value)

    def order(self, column: str, desc: bool = False) -> "AsyncTableQueryBuilder":
        return self._chain("order", column, desc=desc)

    def limit(self, size: int) -> "AsyncTableQueryBuilder":
        return self._chain("limit", size)

    def range(self, start: int, end: int) -> "AsyncTableQueryBuilder":
        return self._chain("range", start, end)

    async def execute(self) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._query.execute)


class DatabaseClient:
    """Supabase database client, created on first use."""

    def __init__(self):
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = create_client(
                settings.require("supabase_url"),
                settings.require("supabase_service_key")
            )
        return self._client

    def table(self, name: str) -> AsyncTableQueryBuilder:
        """Start a query against a table."""
        return AsyncTableQueryBuilder(self.client.table(name))

    async def health_check(self) -> bool:
        """
        Check database connectivity.

        Returns:
            True if a trivial query succeeds, False otherwise
        """
        try:
            await self.table("projects").select("id").limit(1).execute()
            return True
        except Exception as e:
            logger.warning("Database health check failed", exc_info=e)
            return False

    async def run(self, func, *args, **kwargs) -> Any:
        """Run a blocking Supabase call in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, *args, **kwargs))


# Singleton instance
db = DatabaseClient()
