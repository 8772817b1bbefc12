"""Structural paths into a JSON document.

A Path is a tuple of segments: ``int`` segments index arrays, ``str``
segments key objects.  The empty tuple addresses the document root.

format_path renders a path the way it is shown to users::

    format_path(())                          # '$'
    format_path(("customer", 0, "name"))     # '$["customer"][0]["name"]'
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TypeAlias

from json_node_edit.errors import PathResolutionError
from json_node_edit.values import JsonArray, JsonObject, JsonValue

__all__ = ["Path", "Segment", "as_path", "format_path", "resolve_path", "step"]

Segment: TypeAlias = str | int
Path: TypeAlias = tuple[Segment, ...]


def as_path(segments: Sequence[Segment] | None) -> Path:
    """Return ``segments`` as a Path tuple; None means the root."""
    if segments is None:
        return ()
    return tuple(segments)


def format_path(path: Sequence[Segment] | None) -> str:
    """Render a path as ``$`` followed by one bracketed segment per element.

    Integer segments are written bare; string segments as double-quoted JSON
    string literals.  Never raises.
    """
    if not path:
        return "$"
    parts = [
        str(seg) if isinstance(seg, int) and not isinstance(seg, bool)
        else json.dumps(str(seg), ensure_ascii=False)
        for seg in path
    ]
    return "$[" + "][".join(parts) + "]"


def step(
    container: JsonValue, segment: Segment, path: Path, index: int
) -> JsonValue:
    """Descend one segment from ``container``.

    Args:
        container: The value being descended into.
        segment:   Object key (str) or array index (int).
        path:      The full path, for error reporting.
        index:     Position of ``segment`` within ``path``.

    Raises:
        PathResolutionError: If ``container`` is not the kind of container the
            segment requires, or the key/index does not exist.
    """
    where = format_path(path[: index + 1])
    if isinstance(segment, str):
        if not isinstance(container, JsonObject):
            msg = f"{where}: expected an object for key {segment!r}, "
            msg += f"found {container.kind}"
            raise PathResolutionError(msg, path=path, index=index)
        child = container.get(segment)
        if child is None:
            msg = f"{where}: key {segment!r} not found"
            raise PathResolutionError(msg, path=path, index=index)
        return child

    if isinstance(segment, bool) or not isinstance(segment, int):
        msg = f"{where}: invalid path segment {segment!r}"
        raise PathResolutionError(msg, path=path, index=index)
    if not isinstance(container, JsonArray):
        msg = f"{where}: expected an array for index {segment}, found {container.kind}"
        raise PathResolutionError(msg, path=path, index=index)
    child = container.get(segment)
    if child is None:
        msg = f"{where}: index {segment} out of range (length {len(container)})"
        raise PathResolutionError(msg, path=path, index=index)
    return child


def resolve_path(root: JsonValue, path: Sequence[Segment] | None) -> JsonValue:
    """Return the value addressed by ``path`` inside ``root``.

    Raises:
        PathResolutionError: If any segment does not resolve.
    """
    full = as_path(path)
    current = root
    for i, segment in enumerate(full):
        current = step(current, segment, full, i)
    return current
