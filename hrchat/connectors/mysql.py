"""
MySQL Connector

Async-compatible MySQL connector using mysql-connector-python.

The driver is synchronous, so every database round trip runs in a worker
thread via asyncio.to_thread. Connections come from a MySQLConnectionPool
created on connect().
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import mysql.connector
import mysql.connector.pooling
from mysql.connector import Error as MySQLError

from hrchat.connectors.base import (
    BaseConnector,
    ConnectionError,
    QueryError,
    QueryResult,
)

logger = logging.getLogger(__name__)

# Client error codes that mean the server went away rather than the statement failing
_CONNECTION_ERRNOS = {2002, 2003, 2005, 2006, 2013, 2055}


class MySQLConnector(BaseConnector):
    """MySQL database connector using mysql-connector-python."""

    def __init__(
        self,
        host: str,
        port: int = 3306,
        database: str = "",
        user: str = "root",
        password: str = "",
        pool_size: int = 5,
        timeout: int = 30,
        pool_name: str = "hrchat",
        **kwargs,
    ) -> None:
        super().__init__(
            host=host,
            port=port,
            database=database,
            user=user,
            password=password,
            pool_size=pool_size,
            timeout=timeout,
            **kwargs,
        )
        self.pool_name = pool_name
        # The driver pool raises instead of waiting when every connection is checked out
        self._slots = asyncio.Semaphore(pool_size)

    async def connect(self) -> None:
        """Create the connection pool and verify credentials."""
        if self._connected:
            return
        try:
            self._pool = await asyncio.to_thread(self._create_pool_sync)
            await asyncio.to_thread(self._test_connection_sync)
            self._connected = True
            logger.info(
                f"MySQL pool ready ({self.pool_size} connections)",
                extra={"host": self.host, "database": self.database},
            )
        except MySQLError as exc:
            self._pool = None
            logger.error(f"MySQL connection failed: {exc}")
            raise ConnectionError(f"Failed to connect to MySQL: {exc}") from exc

    async def execute(
        self,
        query: str,
        params: list[Any] | dict[str, Any] | None = None,
        timeout: int | None = None,
    ) -> QueryResult:
        """
        Execute SQL query and return rows.

        ``timeout`` caps SELECT run time in seconds through MAX_EXECUTION_TIME.
        """
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")

        start_time = time.perf_counter()
        try:
            async with self._slots:
                rows, columns = await asyncio.to_thread(
                    self._execute_sync, query, params, timeout
                )
        except MySQLError as exc:
            logger.error(f"MySQL query failed: {exc}\nQuery: {query[:200]}...")
            raise self._translate_error(exc) from exc

        execution_time_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"MySQL query returned {len(rows)} rows in {execution_time_ms:.1f}ms",
            extra={"row_count": len(rows)},
        )
        return QueryResult(
            rows=rows,
            row_count=len(rows),
            columns=columns,
            execution_time_ms=execution_time_ms,
        )

    async def call_procedure(self, name: str, args: list[Any] | None = None) -> None:
        """Call a stored procedure, e.g. update_schema_info."""
        if not self._connected:
            raise ConnectionError("Not connected to database. Call connect() first.")
        try:
            async with self._slots:
                await asyncio.to_thread(self._call_procedure_sync, name, args or [])
        except MySQLError as exc:
            logger.error(f"MySQL procedure {name} failed: {exc}")
            raise self._translate_error(exc) from exc
        logger.info(f"Called stored procedure {name}")

    async def close(self) -> None:
        """Drop the pool reference; pooled connections close when released."""
        self._pool = None
        self._connected = False

    def _translate_error(self, exc: MySQLError) -> Exception:
        if getattr(exc, "errno", None) in _CONNECTION_ERRNOS:
            return ConnectionError(f"Lost connection to MySQL: {exc.msg or exc}")
        # The driver's ``msg`` is the server text without the errno prefix
        return QueryError(getattr(exc, "msg", None) or str(exc))

    def _connection_kwargs(self) -> dict[str, Any]:
        kwargs = {
            "host": self.host,
            "port": self.port,
            "database": self.database or None,
            "user": self.user,
            "password": self.password,
            "autocommit": True,
            "connection_timeout": self.timeout,
        }
        kwargs.update(self.kwargs)
        return kwargs

    def _create_pool_sync(self):
        return mysql.connector.pooling.MySQLConnectionPool(
            pool_name=self.pool_name,
            pool_size=self.pool_size,
            **self._connection_kwargs(),
        )

    def _test_connection_sync(self) -> None:
        conn = self._pool.get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute("SELECT VERSION()")
            cursor.fetchone()
        finally:
            cursor.close()
            conn.close()

    def _execute_sync(
        self,
        query: str,
        params: list[Any] | dict[str, Any] | None,
        timeout: int | None = None,
    ) -> tuple[list[dict[str, Any]], list[str]]:
        conn = self._pool.get_connection()
        cursor = conn.cursor(dictionary=True)
        try:
            if timeout:
                # Session variable, cleared when the pool resets the connection
                cursor.execute("SET SESSION MAX_EXECUTION_TIME = %s", (int(timeout * 1000),))
            if params is None:
                cursor.execute(query)
            elif isinstance(params, dict):
                cursor.execute(query, params)
            else:
                cursor.execute(query, tuple(params))
            if cursor.with_rows:
                rows = cursor.fetchall()
                columns = list(rows[0].keys()) if rows else [col[0] for col in cursor.description]
                return rows, columns
            return [], []
        finally:
            cursor.close()
            conn.close()

    def _call_procedure_sync(self, name: str, args: list[Any]) -> None:
        conn = self._pool.get_connection()
        cursor = conn.cursor()
        try:
            cursor.callproc(name, tuple(args))
            # Drain any result sets the procedure produced
            for result in cursor.stored_results():
                result.fetchall()
        finally:
            cursor.close()
            conn.close()
