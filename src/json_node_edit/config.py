"""EditorConfig: serialization and caching settings shared by every component.

EditorConfig is a frozen (immutable) dataclass.  The defaults produce the
canonical document form: two-space indentation with non-ASCII characters
written verbatim, so that re-serializing after a patch yields minimal diffs.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["DEFAULT_CONFIG", "EditorConfig"]


@dataclass(frozen=True, slots=True)
class EditorConfig:
    """Immutable configuration for normalization, patching and edit sessions.

    Attributes:
        indent: Spaces per nesting level when serializing documents and
            normalized row text (>= 0).  Defaults to 2.
        ensure_ascii: When True, non-ASCII characters are escaped as
            ``\\uXXXX`` sequences.  Default False.
        parse_cache_size: Maximum number of parsed documents held in the
            LRU parse cache (>= 1).  Defaults to 64.
    """

    indent: int = 2
    ensure_ascii: bool = False
    parse_cache_size: int = 64

    def __post_init__(self) -> None:
        if self.indent < 0:
            msg = f"indent must be >= 0, got {self.indent}"
            raise ValueError(msg)
        if self.parse_cache_size < 1:
            msg = f"parse_cache_size must be >= 1, got {self.parse_cache_size}"
            raise ValueError(msg)


DEFAULT_CONFIG = EditorConfig()
