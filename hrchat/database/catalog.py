"""
Schema metadata catalog.

Reads the ``db_schema_info`` and ``db_relationships_info`` tables that the
``update_schema_info`` stored procedure maintains, and renders them as the
schema text sent to the completion service.
"""

from __future__ import annotations

import logging

from hrchat.connectors.base import BaseConnector, ConnectorError
from hrchat.models.database import SchemaTable, TableRelationship
from hrchat.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)

SCHEMA_NOT_INITIALIZED = "Schema not initialized. Run: CALL update_schema_info();"
SCHEMA_LOAD_ERROR = "Error loading database schema"
REFRESH_PROCEDURE = "update_schema_info"

_TABLES_SQL = (
    "SELECT table_name, table_columns, sample_data FROM db_schema_info ORDER BY table_name"
)
_RELATIONSHIPS_SQL = (
    "SELECT from_table, from_column, to_table, to_column, relationship_type "
    "FROM db_relationships_info"
)
_TABLE_NAMES_SQL = "SELECT table_name FROM db_schema_info ORDER BY table_name"


class SchemaCatalog:
    """Schema text for prompts and the admin surface."""

    def __init__(self, connector: BaseConnector, prompts: PromptLoader | None = None) -> None:
        self.connector = connector
        self.prompts = prompts or PromptLoader()

    async def get_enhanced_schema(self) -> str:
        """
        Schema with sample rows, relationships, column meanings and query notes.

        Never raises: an empty catalog or a read failure yields a short notice
        that still makes a usable system instruction.
        """
        try:
            tables = await self._load_tables()
            if not tables:
                return SCHEMA_NOT_INITIALIZED
            relationships = await self._load_relationships()
        except ConnectorError as exc:
            logger.error(f"Schema load failed: {exc}")
            return SCHEMA_LOAD_ERROR

        return self.prompts.render(
            "schema/enhanced_schema.md", tables=tables, relationships=relationships
        )

    async def get_schema(self) -> str:
        """Plain table and relationship listing."""
        try:
            tables = await self._load_tables()
            if not tables:
                return "Schema not initialized."
            relationships = await self._load_relationships()
        except ConnectorError as exc:
            logger.error(f"Schema load failed: {exc}")
            return "Error loading schema"

        return self.prompts.render("schema/basic_schema.md", tables=tables, relationships=relationships)

    async def get_table_list(self) -> list[str]:
        """Names of the catalogued tables."""
        try:
            result = await self.connector.execute(_TABLE_NAMES_SQL)
        except ConnectorError as exc:
            logger.error(f"Table list load failed: {exc}")
            return []
        return [str(row["table_name"]) for row in result.rows]

    async def refresh_schema(self) -> None:
        """
        Rebuild the metadata tables through the stored procedure.

        Raises:
            ConnectorError: If the procedure fails
        """
        logger.info("Refreshing schema metadata")
        await self.connector.call_procedure(REFRESH_PROCEDURE)

    async def _load_tables(self) -> list[SchemaTable]:
        result = await self.connector.execute(_TABLES_SQL)
        return [SchemaTable(**row) for row in result.rows]

    async def _load_relationships(self) -> list[TableRelationship]:
        result = await self.connector.execute(_RELATIONSHIPS_SQL)
        return [TableRelationship(**row) for row in result.rows]
