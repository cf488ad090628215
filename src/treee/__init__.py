"""Tree-E outline store: indented trees of tasks and notes with branch views."""

from treee.models.node import Node, NodeFilter, StoreSnapshot, Tree
from treee.protocols import StorageProtocol
from treee.storage import SqliteStorage
from treee.store import OutlineStore

__all__ = [
    "Node",
    "NodeFilter",
    "OutlineStore",
    "SqliteStorage",
    "StorageProtocol",
    "StoreSnapshot",
    "Tree",
]
