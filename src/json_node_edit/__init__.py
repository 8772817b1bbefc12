"""json-node-edit - path-scoped point edits on a JSON document and its node graph."""

from __future__ import annotations

from json_node_edit.config import EditorConfig
from json_node_edit.errors import (
    NodeEditError,
    ParseError,
    PathResolutionError,
    SessionStateError,
)
from json_node_edit.paths import Path, format_path, resolve_path
from json_node_edit.patcher import assign_at_path, patch_document
from json_node_edit.result import PatchResult, SaveResult
from json_node_edit.rows import Node, Row, RowType, merge_rows, normalize_rows
from json_node_edit.serializer import ParseCache, dump_document, parse_document
from json_node_edit.session import EditMode, EditSession
from json_node_edit.stores import (
    DocumentStore,
    InMemoryDocumentStore,
    InMemoryNodeGraphStore,
    NodeGraphStore,
    hold_notifications,
)

__version__: str = "0.1.0"
__all__: list[str] = [
    "DocumentStore",
    "EditMode",
    "EditSession",
    "EditorConfig",
    "InMemoryDocumentStore",
    "InMemoryNodeGraphStore",
    "Node",
    "NodeEditError",
    "NodeGraphStore",
    "ParseCache",
    "ParseError",
    "Path",
    "PatchResult",
    "PathResolutionError",
    "Row",
    "RowType",
    "SaveResult",
    "SessionStateError",
    "assign_at_path",
    "dump_document",
    "format_path",
    "hold_notifications",
    "merge_rows",
    "normalize_rows",
    "parse_document",
    "patch_document",
    "resolve_path",
]
