"""Document patcher: replace the value at one path and re-serialize.

The patch is computed on the tagged tree as a persistent update: containers
along the path are rebuilt, every other subtree is shared with the original
tree, and the original is never mutated.  Object members and array items keep
their order; a new object key is appended after the existing members.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from json_node_edit.config import EditorConfig
from json_node_edit.errors import ParseError, PathResolutionError
from json_node_edit.paths import Path, Segment, as_path, format_path, step
from json_node_edit.result import PatchResult
from json_node_edit.serializer import ParseCache, dump_document, parse_document
from json_node_edit.values import JsonArray, JsonObject, JsonValue, from_python

__all__ = ["assign_at_path", "keep_containers", "patch_document"]

logger = logging.getLogger(__name__)


def _assign(
    container: JsonValue, segment: Segment, value: JsonValue, path: Path, index: int
) -> JsonValue:
    where = format_path(path[: index + 1])
    if isinstance(segment, str):
        if not isinstance(container, JsonObject):
            msg = f"{where}: cannot set key {segment!r} on {container.kind}"
            raise PathResolutionError(msg, path=path, index=index)
        return container.with_member(segment, value)

    if isinstance(segment, bool) or not isinstance(segment, int):
        msg = f"{where}: invalid path segment {segment!r}"
        raise PathResolutionError(msg, path=path, index=index)
    if not isinstance(container, JsonArray):
        msg = f"{where}: cannot set index {segment} on {container.kind}"
        raise PathResolutionError(msg, path=path, index=index)
    if not 0 <= segment <= len(container):
        msg = f"{where}: index {segment} out of range (length {len(container)})"
        raise PathResolutionError(msg, path=path, index=index)
    return container.with_item(segment, value)


def _existing(container: JsonValue, segment: Segment) -> JsonValue | None:
    if isinstance(container, JsonObject) and isinstance(segment, str):
        return container.get(segment)
    if (
        isinstance(container, JsonArray)
        and isinstance(segment, int)
        and not isinstance(segment, bool)
    ):
        return container.get(segment)
    return None


def keep_containers(current: JsonValue | None, edited: JsonValue) -> JsonValue:
    """Carry container members of ``current`` that ``edited`` does not mention.

    When both values are objects, the result lists members in ``current``'s
    order: edited keys take their edited value, array/object members absent
    from ``edited`` are kept, and scalar members absent from ``edited`` are
    dropped.  Keys new in ``edited`` follow, in ``edited``'s order.  In every
    other case ``edited`` is returned as is.
    """
    if not isinstance(current, JsonObject) or not isinstance(edited, JsonObject):
        return edited
    edited_members = dict(edited.members)
    members: list[tuple[str, JsonValue]] = []
    for key, value in current.members:
        if key in edited_members:
            members.append((key, edited_members.pop(key)))
        elif value.is_container:
            members.append((key, value))
    members.extend(edited_members.items())
    return JsonObject(tuple(members))


def assign_at_path(
    root: JsonValue,
    path: Sequence[Segment] | None,
    value: JsonValue | Any,
    *,
    preserve_containers: bool = False,
) -> JsonValue:
    """Return a copy of ``root`` with ``value`` stored at ``path``.

    Every segment but the last must address an existing container of the
    matching kind.  The last segment overwrites an existing member/item, adds
    a new object member, or appends to an array when it equals the length.

    Args:
        root:  The tagged document tree.  Not modified.
        path:  Target path; empty means replace the whole document.
        value: Tagged or plain Python JSON value.
        preserve_containers: When True and both the replaced value and
            ``value`` are objects, array/object members missing from ``value``
            are carried over (see ``keep_containers``).

    Raises:
        PathResolutionError: If the path does not resolve to an assignable slot.
        TypeError: If ``value`` is not a JSON value.
        ValueError: If ``value`` holds a non-finite float.
    """
    full = as_path(path)
    new_value = from_python(value)
    if not full:
        return keep_containers(root, new_value) if preserve_containers else new_value

    chain = [root]
    for i, segment in enumerate(full[:-1]):
        chain.append(step(chain[-1], segment, full, i))

    if preserve_containers:
        new_value = keep_containers(_existing(chain[-1], full[-1]), new_value)
    updated = _assign(chain[-1], full[-1], new_value, full, len(full) - 1)
    # Rebuild parents bottom-up; each of these keys/indices is known to exist.
    for i in range(len(full) - 2, -1, -1):
        updated = _assign(chain[i], full[i], updated, full, i)
    return updated


def patch_document(
    document_text: str,
    path: Sequence[Segment] | None,
    new_value: JsonValue | Any,
    *,
    config: EditorConfig | None = None,
    cache: ParseCache | None = None,
    preserve_containers: bool = False,
) -> PatchResult:
    """Replace the value at ``path`` inside ``document_text``.

    Never raises for bad documents or paths: on failure the returned
    ``PatchResult`` carries the error and the input text unchanged.

    Args:
        document_text: The current serialized document.
        path:          Target path; empty (or None) replaces the whole document.
        new_value:     Tagged or plain Python JSON value to store.
        config:        Serialization settings.  Defaults to ``EditorConfig()``.
        cache:         Optional ParseCache used to parse ``document_text``.
        preserve_containers: Forwarded to ``assign_at_path``.

    Returns:
        A PatchResult with the re-serialized document, or with a ParseError /
        PathResolutionError.  A patched tree that cannot be written back
        (an over-long integer, nesting too deep) is reported as a ParseError.

    Raises:
        TypeError: If ``new_value`` is not a JSON value.
        ValueError: If ``new_value`` holds a non-finite float.
    """
    full = as_path(path)
    value = from_python(new_value)

    try:
        root = cache.parse(document_text) if cache is not None else parse_document(
            document_text
        )
    except ParseError as exc:
        logger.debug("Patch at %s rejected: %s", format_path(full), exc)
        return PatchResult(text=document_text, error=exc)

    try:
        updated = assign_at_path(
            root, full, value, preserve_containers=preserve_containers
        )
    except PathResolutionError as exc:
        logger.debug("Patch at %s rejected: %s", format_path(full), exc)
        return PatchResult(text=document_text, error=exc)

    try:
        text = dump_document(updated, config)
    except ValueError as exc:
        error = ParseError(f"Patched document cannot be serialized: {exc}")
        logger.debug("Patch at %s rejected: %s", format_path(full), error)
        return PatchResult(text=document_text, error=error)

    logger.debug("Patched document at %s", format_path(full))
    return PatchResult(text=text)
