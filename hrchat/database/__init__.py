"""HR database stores: schema catalog and chat logs."""

from hrchat.database.catalog import SchemaCatalog
from hrchat.database.chat_logs import ChatLogStore

__all__ = ["SchemaCatalog", "ChatLogStore"]
