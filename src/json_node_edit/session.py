"""EditSession: the Viewing/Editing state machine for a single point edit.

The session coordinates the other components::

    begin_edit   draft = normalize_rows(selected.rows)           Viewing -> Editing
    save         parse draft -> patch_document -> commit stores  Editing -> Viewing
    cancel       discard draft                                   Editing -> Viewing

A failed save leaves the session in Editing with the draft intact and both
stores untouched; the reason is returned in the SaveResult.  A successful save
writes the document text and the merged node under one
``hold_notifications`` block, so store listeners never see one without the
other.
"""

from __future__ import annotations

import logging
from enum import StrEnum, auto

from json_node_edit.config import DEFAULT_CONFIG, EditorConfig
from json_node_edit.errors import NodeEditError, ParseError, SessionStateError
from json_node_edit.paths import format_path
from json_node_edit.patcher import patch_document
from json_node_edit.result import SaveResult
from json_node_edit.rows import Node, merge_rows, normalize_rows
from json_node_edit.serializer import ParseCache, parse_document
from json_node_edit.stores import DocumentStore, NodeGraphStore, hold_notifications

__all__ = ["EditMode", "EditSession"]

logger = logging.getLogger(__name__)


class EditMode(StrEnum):
    """VIEWING -> "viewing", EDITING -> "editing"."""

    VIEWING = auto()
    EDITING = auto()


class EditSession:
    """Edit state for the currently selected node.

    Args:
        document_store: Owner of the serialized document.
        graph_store:    Owner of the nodes and the selection.
        config:         Serialization settings.  Defaults to ``EditorConfig()``.

    Example::

        session = EditSession(document_store, graph_store)
        session.begin_edit()
        session.update_draft('{"name": "Ada"}')
        result = session.save()
        if not result.ok:
            show_error(result.error)
    """

    def __init__(
        self,
        document_store: DocumentStore,
        graph_store: NodeGraphStore,
        config: EditorConfig | None = None,
    ) -> None:
        self._documents = document_store
        self._graph = graph_store
        self._config: EditorConfig = config if config is not None else DEFAULT_CONFIG
        self._cache = ParseCache(max_size=self._config.parse_cache_size)
        self._mode = EditMode.VIEWING
        self._draft = ""

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def mode(self) -> EditMode:
        return self._mode

    @property
    def is_editing(self) -> bool:
        return self._mode is EditMode.EDITING

    @property
    def draft(self) -> str:
        """The text being edited; empty while Viewing."""
        return self._draft

    @property
    def selected_node(self) -> Node | None:
        return self._graph.get_selected_node()

    @property
    def content_text(self) -> str | None:
        """Normalized rows of the selected node, or None when nothing is selected."""
        node = self.selected_node
        if node is None:
            return None
        return normalize_rows(node.rows, self._config)

    @property
    def path_text(self) -> str | None:
        """Formatted path of the selected node, or None when nothing is selected."""
        node = self.selected_node
        if node is None:
            return None
        return format_path(node.path)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin_edit(self) -> bool:
        """Enter Editing with the selected node's normalized rows as the draft.

        Returns:
            False (and stays Viewing) when no node is selected.
        """
        node = self.selected_node
        if node is None:
            logger.debug("begin_edit ignored: no node selected")
            return False
        self._draft = normalize_rows(node.rows, self._config)
        self._mode = EditMode.EDITING
        logger.debug("Editing node %s at %s", node.id, format_path(node.path))
        return True

    def update_draft(self, text: str) -> None:
        """Replace the draft text.

        Raises:
            SessionStateError: If the session is not Editing.
        """
        if not self.is_editing:
            msg = "update_draft requires an active edit"
            raise SessionStateError(msg)
        self._draft = text

    def cancel(self) -> None:
        """Discard the draft and return to Viewing.  Stores are not touched."""
        self._draft = ""
        self._mode = EditMode.VIEWING

    def close(self) -> None:
        """Discard any edit in progress; valid in every mode."""
        self.cancel()

    def save(self) -> SaveResult:
        """Validate the draft, patch the document and merge into the node.

        Returns:
            A SaveResult.  On failure the session stays in its current mode,
            the draft is kept, and neither store is modified.
        """
        if not self.is_editing:
            return self._reject(SessionStateError("save requires an active edit"))

        node = self.selected_node
        if node is None:
            return self._reject(SessionStateError("selected node no longer exists"))

        try:
            edited = parse_document(self._draft)
        except ParseError as exc:
            return self._reject(exc)

        patched = patch_document(
            self._documents.get_document_text(),
            node.path,
            edited,
            config=self._config,
            cache=self._cache,
            preserve_containers=True,
        )
        if patched.error is not None:
            return self._reject(patched.error)

        merged = node.with_rows(merge_rows(node.rows, edited))
        nodes = [
            merged if existing.id == node.id else existing
            for existing in self._graph.get_all_nodes()
        ]
        with hold_notifications(self._documents, self._graph):
            self._documents.set_document_text(patched.text)
            self._graph.commit(nodes, merged)

        self._draft = ""
        self._mode = EditMode.VIEWING
        logger.info("Saved edit to node %s at %s", node.id, format_path(node.path))
        return SaveResult(document_text=patched.text, node=merged)

    def _reject(self, error: NodeEditError) -> SaveResult:
        logger.warning("Save rejected: %s", error)
        return SaveResult(error=error)
