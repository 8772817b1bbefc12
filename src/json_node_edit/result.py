"""Result types returned by patch_document and EditSession.save.

Failures are carried as values instead of raised, so the presentation layer
can keep the user's draft and show the error.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from json_node_edit.errors import (
    NodeEditError,
    ParseError,
    PathResolutionError,
    SessionStateError,
)

if TYPE_CHECKING:
    from json_node_edit.rows import Node

__all__ = ["PatchResult", "SaveResult"]


@dataclass(frozen=True, slots=True)
class PatchResult:
    """Outcome of a document patch.

    Attributes:
        text:  The patched document text on success; the input text, unchanged,
            on failure.
        error: None on success, otherwise the ParseError or PathResolutionError
            that stopped the patch.
    """

    text: str
    error: ParseError | PathResolutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the patched text, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.text


@dataclass(frozen=True, slots=True)
class SaveResult:
    """Outcome of ``EditSession.save``.

    Attributes:
        error: None when the edit was committed, otherwise the reason it was
            rejected (ParseError, PathResolutionError or SessionStateError).
        document_text: The committed document text on success.
        node: The merged node committed to the graph store on success.
    """

    error: NodeEditError | None = None
    document_text: str | None = None
    node: Node | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Node:
        """Return the committed node, or raise the carried error.

        Raises:
            NodeEditError: The carried error when the save failed.
            SessionStateError: If the result carries neither an error nor a node.
        """
        if self.error is not None:
            raise self.error
        if self.node is None:
            msg = "SaveResult carries neither an error nor a committed node"
            raise SessionStateError(msg)
        return self.node
