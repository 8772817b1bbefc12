"""pytest plugin for json-node-edit.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import pytest

from json_node_edit import (
    EditorConfig,
    EditSession,
    InMemoryDocumentStore,
    InMemoryNodeGraphStore,
    Node,
    dump_document,
)


@dataclass(frozen=True, slots=True)
class EditHarness:
    """An EditSession wired to fresh in-memory stores."""

    session: EditSession
    documents: InMemoryDocumentStore
    graph: InMemoryNodeGraphStore


@pytest.fixture
def edit_session_factory() -> Callable[..., EditHarness]:
    """Fixture that returns a builder for EditSession test harnesses.

    Usage in tests::

        def test_rename(edit_session_factory):
            harness = edit_session_factory(
                {"name": "Ada"},
                [Node("root", (), [Row("name", "Ada")])],
                selected="root",
            )
            harness.session.begin_edit()

    Returns:
        A callable ``_make(document, nodes=(), selected=None, config=None)``.
        ``document`` may be JSON text or a plain Python JSON value (serialized
        in canonical form).  ``selected`` is the id of the node to select.
    """

    def _make(
        document: str | Any,
        nodes: Iterable[Node] = (),
        selected: str | None = None,
        config: EditorConfig | None = None,
    ) -> EditHarness:
        if isinstance(document, str):
            text = document
        else:
            text = dump_document(document, config)
        documents = InMemoryDocumentStore(text)
        graph = InMemoryNodeGraphStore(nodes)
        if selected is not None:
            graph.select(selected)
        return EditHarness(
            session=EditSession(documents, graph, config=config),
            documents=documents,
            graph=graph,
        )

    return _make
