"""Strict JSON parsing into tagged values, and canonical re-serialization.

``parse_document`` accepts exactly what a JSON parser in a browser accepts:
the non-standard ``NaN``/``Infinity`` literals that Python's ``json`` module
tolerates are rejected with ParseError.

``dump_document`` always writes the canonical form configured by
EditorConfig (two-space indentation by default) and preserves object member
order.

Parsed trees are cached in a ``ParseCache`` keyed by document text.  Tagged
values are immutable, so a cached tree can be handed out to any number of
callers.

Example::

    cache = ParseCache(max_size=16)
    tree = cache.parse('{"a": 1}')       # parsed
    tree is cache.parse('{"a": 1}')      # True: served from memory
"""

from __future__ import annotations

import json
from typing import Any

from cachetools import LRUCache

from json_node_edit.config import DEFAULT_CONFIG, EditorConfig
from json_node_edit.errors import ParseError
from json_node_edit.values import JsonValue, from_python, to_python

__all__ = ["ParseCache", "dump_document", "parse_document"]


def _reject_constant(name: str) -> Any:
    raise ParseError(f"Invalid JSON literal: {name}")


def parse_document(text: str) -> JsonValue:
    """Parse JSON text into a tagged value.

    Args:
        text: The JSON text.

    Returns:
        The tagged root value.

    Raises:
        ParseError: If ``text`` is not valid JSON, holds an integer longer than
            the interpreter's digit limit, or nests too deeply to decode.
            Line/column/position are populated from the decoder when it
            reports them.
    """
    if not isinstance(text, str):
        msg = f"JSON text must be str, got {type(text)!r}"
        raise ParseError(msg)
    try:
        raw = json.loads(text, parse_constant=_reject_constant)
    except ParseError:
        raise
    except json.JSONDecodeError as exc:
        raise ParseError(
            f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})",
            line=exc.lineno,
            column=exc.colno,
            position=exc.pos,
        ) from exc
    except ValueError as exc:
        # over-long integer literals
        raise ParseError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseError("Invalid JSON: document is nested too deeply") from exc
    try:
        return from_python(raw)
    except ValueError as exc:
        # e.g. 1e400 decodes to an infinite float
        raise ParseError(f"Invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ParseError("Invalid JSON: document is nested too deeply") from exc


def dump_document(value: JsonValue | Any, config: EditorConfig | None = None) -> str:
    """Serialize a tagged (or plain Python) JSON value in canonical form.

    Args:
        value:  Tagged value, or any plain Python JSON value.
        config: Serialization settings.  Defaults to ``EditorConfig()`` when None.

    Returns:
        JSON text indented by ``config.indent`` spaces per level.

    Raises:
        ValueError: If ``value`` holds an integer too long to write or is
            nested too deeply to serialize.
    """
    cfg = config if config is not None else DEFAULT_CONFIG
    try:
        plain = to_python(from_python(value))
        return json.dumps(
            plain,
            indent=cfg.indent,
            ensure_ascii=cfg.ensure_ascii,
            allow_nan=False,
        )
    except RecursionError as exc:
        msg = "JSON value is nested too deeply to serialize"
        raise ValueError(msg) from exc


class ParseCache:
    """LRU-backed memo of ``parse_document`` results keyed by text.

    Each instance owns its own ``LRUCache``; nothing is shared between
    instances.  Failed parses are never cached, so a malformed document is
    re-reported on every call.

    Args:
        max_size: Maximum number of parsed documents kept in memory.
            Defaults to 64.
    """

    def __init__(self, max_size: int = 64) -> None:
        self._cache: LRUCache[str, JsonValue] = LRUCache(maxsize=max_size)

    @property
    def max_size(self) -> int:
        return int(self._cache.maxsize)

    @property
    def curr_size(self) -> int:
        return int(self._cache.currsize)

    def __contains__(self, text: object) -> bool:
        return text in self._cache

    def parse(self, text: str) -> JsonValue:
        """Return the parsed tree for ``text``, parsing only on a cache miss.

        Raises:
            ParseError: If ``text`` is not valid JSON.
        """
        cached = self._cache.get(text)
        if cached is not None:
            return cached
        tree = parse_document(text)
        self._cache[text] = tree
        return tree

    def clear(self) -> None:
        self._cache.clear()
