"""Exception types raised or carried by json-node-edit operations.

Every failure is scoped to a single edit attempt:

- ParseError:          text that should be JSON does not parse.
- PathResolutionError: a path segment does not address an existing container.
- SessionStateError:   an EditSession operation is invalid in the current mode.

``patch_document`` and ``EditSession.save`` do not raise these; they return
them inside a ``PatchResult`` / ``SaveResult`` so the caller decides how to
surface them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from json_node_edit.paths import Path

__all__ = [
    "NodeEditError",
    "ParseError",
    "PathResolutionError",
    "SessionStateError",
]


class NodeEditError(Exception):
    """Base class for all json-node-edit errors."""


class ParseError(NodeEditError, ValueError):
    """Input text is not valid JSON.

    Attributes:
        line:     1-based line of the syntax error, when known.
        column:   1-based column of the syntax error, when known.
        position: 0-based character offset of the syntax error, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        line: int | None = None,
        column: int | None = None,
        position: int | None = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column
        self.position = position


class PathResolutionError(NodeEditError, LookupError):
    """A path does not resolve inside the target document.

    Attributes:
        path:  The full path that was being resolved.
        index: Position within ``path`` of the segment that failed.
    """

    def __init__(self, message: str, *, path: Path, index: int) -> None:
        super().__init__(message)
        self.path = path
        self.index = index


class SessionStateError(NodeEditError, RuntimeError):
    """An edit-session operation was invoked in a state that does not allow it."""
