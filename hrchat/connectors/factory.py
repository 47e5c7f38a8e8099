"""Connector factory for the HR database URL."""

from __future__ import annotations

from urllib.parse import unquote, urlparse

from hrchat.connectors.base import BaseConnector
from hrchat.connectors.mysql import MySQLConnector

_MYSQL_SCHEMES = {"mysql"}


def infer_database_type(database_url: str) -> str:
    """Infer logical database type from connection URL scheme."""
    parsed = urlparse(database_url)
    scheme = parsed.scheme.split("+")[0].lower()
    if scheme in _MYSQL_SCHEMES:
        return "mysql"
    raise ValueError(f"Unsupported database URL scheme: {parsed.scheme}")


def create_connector(
    *,
    database_url: str,
    pool_size: int = 5,
    timeout: int = 30,
    **kwargs,
) -> BaseConnector:
    """Create a connector instance from a ``mysql://`` URL."""
    parsed = urlparse(database_url)
    if not parsed.hostname:
        raise ValueError("Invalid database URL: host is required.")

    infer_database_type(database_url)
    db_name = parsed.path.lstrip("/")

    return MySQLConnector(
        host=parsed.hostname,
        port=parsed.port or 3306,
        database=db_name or "",
        user=unquote(parsed.username) if parsed.username else "root",
        password=unquote(parsed.password) if parsed.password else "",
        pool_size=pool_size,
        timeout=timeout,
        **kwargs,
    )
