"""Nodes, rows, and the row normalizer.

A Node denormalizes one document location into ordered Rows.  Scalar rows
carry their value inline; array and object rows only carry a placeholder
because their contents are owned by descendant nodes.

normalize_rows turns a node's rows into the JSON text shown and edited for
that node; merge_rows writes an edited value back into the rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum, auto
from typing import Any

from json_node_edit.config import EditorConfig
from json_node_edit.paths import Path
from json_node_edit.serializer import dump_document
from json_node_edit.values import JsonValue, ValueKind, from_python, to_python

__all__ = ["Node", "Row", "RowType", "merge_rows", "normalize_rows"]


class RowType(StrEnum):
    """Type tag of a Row: SCALAR -> "scalar", ARRAY -> "array", OBJECT -> "object"."""

    SCALAR = auto()
    ARRAY = auto()
    OBJECT = auto()

    @classmethod
    def of(cls, value: Any) -> RowType:
        """Return the tag a row holding ``value`` would carry."""
        kind = from_python(value).kind
        if kind is ValueKind.ARRAY:
            return cls.ARRAY
        if kind is ValueKind.OBJECT:
            return cls.OBJECT
        return cls.SCALAR


@dataclass(frozen=True, slots=True)
class Row:
    """One field of a Node.

    Attributes:
        key:      Object key of the field; None only for a node that represents
                  a bare root value.
        value:    Plain Python JSON value for scalar rows; a JSON placeholder
                  (e.g. item count) for array/object rows.
        row_type: Type tag (see RowType).

    Raises:
        TypeError: If ``value`` is not a JSON value.
    """

    key: str | None = None
    value: Any = None
    row_type: RowType = RowType.SCALAR

    def __post_init__(self) -> None:
        from_python(self.value)

    @property
    def is_scalar(self) -> bool:
        return self.row_type is RowType.SCALAR


@dataclass(frozen=True, slots=True)
class Node:
    """A graph vertex denormalizing one document location.

    Attributes:
        id:   Identifier, unique within one node collection.
        path: Location of the node in the document.
        rows: Fields in document order.
    """

    id: str
    path: Path = ()
    rows: tuple[Row, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence; stored as tuples.
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "rows", tuple(self.rows))

    def with_rows(self, rows: Sequence[Row]) -> Node:
        return replace(self, rows=tuple(rows))


def normalize_rows(
    rows: Sequence[Row] | None, config: EditorConfig | None = None
) -> str:
    """Render a node's rows as canonical, editable JSON text.

    - No rows: ``"{}"``.
    - A single row without a key: that row's value as JSON.
    - Otherwise: an object of the keyed scalar rows, in row order.  Array and
      object rows are left out since descendant nodes own their contents.

    Never raises.
    """
    if not rows:
        return "{}"
    if len(rows) == 1 and rows[0].key is None:
        return dump_document(rows[0].value, config)

    fields = {
        row.key: row.value for row in rows if row.is_scalar and row.key is not None
    }
    return dump_document(fields, config)


def merge_rows(rows: Sequence[Row], edited: JsonValue | Any) -> tuple[Row, ...]:
    """Write an edited value back into a node's rows.

    - A keyless scalar row takes the whole edited value.
    - A keyed scalar row takes ``edited[key]`` when the edited value is an
      object containing that key.
    - Array/object rows and rows whose key is missing keep their value.

    Rows are never added, removed, renamed or re-tagged.
    """
    plain = to_python(from_python(edited))
    merged: list[Row] = []
    for row in rows:
        if not row.is_scalar:
            merged.append(row)
        elif row.key is None:
            merged.append(replace(row, value=plain))
        elif isinstance(plain, dict) and row.key in plain:
            merged.append(replace(row, value=plain[row.key]))
        else:
            merged.append(row)
    return tuple(merged)
