"""Integrations subpackage for json-node-edit.

Contains the pytest plugin (auto-discovered via the pytest11 entry point),
which provides fixtures for testing presentation code bound to an EditSession.
"""

from __future__ import annotations

__all__: list[str] = []
