"""Document and node-graph stores.

The two stores are independent pieces of shared state.  Any object with the
right methods satisfies the ``DocumentStore`` / ``NodeGraphStore`` protocols;
the in-memory implementations here add change listeners.

``hold_notifications`` defers listener calls on several stores until the block
exits, so a combined update (document text + node list + selection) is seen by
listeners as a single change::

    with hold_notifications(document_store, graph_store):
        document_store.set_document_text(updated)
        graph_store.commit(nodes, selected_node)
    # listeners of both stores run here, after both writes
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

from json_node_edit.rows import Node
from json_node_edit.serializer import parse_document

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "InMemoryNodeGraphStore",
    "Listener",
    "NodeGraphStore",
    "hold_notifications",
]

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


@runtime_checkable
class DocumentStore(Protocol):
    """Owner of the serialized document text."""

    def get_document_text(self) -> str: ...

    def set_document_text(self, text: str) -> None: ...


@runtime_checkable
class NodeGraphStore(Protocol):
    """Owner of the node collection and the current selection."""

    def get_selected_node(self) -> Node | None: ...

    def get_all_nodes(self) -> list[Node]: ...

    def commit(self, nodes: Sequence[Node], selected_node: Node | None) -> None: ...


class _ObservableStore:
    """Listener bookkeeping shared by the in-memory stores."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        self._hold_depth = 0
        self._dirty = False

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _mark_changed(self) -> bool:
        """Record a change; return True when listeners should run right away."""
        if self._hold_depth:
            self._dirty = True
            return False
        return True

    def _begin_hold(self) -> None:
        self._lock.acquire()
        self._hold_depth += 1

    def _end_hold(self) -> bool:
        """Leave one hold level; return True when a deferred change must flush."""
        try:
            self._hold_depth -= 1
            if self._hold_depth == 0 and self._dirty:
                self._dirty = False
                return True
            return False
        finally:
            self._lock.release()

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener()


class InMemoryDocumentStore(_ObservableStore):
    """Holds the document text; rejects text that is not valid JSON.

    Args:
        text: Initial document text.  Defaults to ``"{}"``.

    Raises:
        ParseError: If ``text`` is not valid JSON.
    """

    def __init__(self, text: str = "{}") -> None:
        super().__init__()
        parse_document(text)
        self._text = text

    def get_document_text(self) -> str:
        with self._lock:
            return self._text

    def set_document_text(self, text: str) -> None:
        """Replace the document text.

        Raises:
            ParseError: If ``text`` is not valid JSON; the stored text is kept.
        """
        parse_document(text)
        with self._lock:
            if text == self._text:
                return
            self._text = text
            notify_now = self._mark_changed()
        logger.debug("Document text replaced (%d chars)", len(text))
        if notify_now:
            self._notify()


class InMemoryNodeGraphStore(_ObservableStore):
    """Holds the node collection and the selected node's id.

    The selection is a weak reference: only the id is kept and it is looked up
    in the current collection on every read, so a node removed by a rebuild
    reads as no selection.

    Args:
        nodes:       Initial node collection.
        selected_id: Id of the initially selected node, if any.
    """

    def __init__(
        self, nodes: Iterable[Node] = (), selected_id: str | None = None
    ) -> None:
        super().__init__()
        self._nodes: list[Node] = list(nodes)
        self._selected_id = selected_id

    @property
    def selected_id(self) -> str | None:
        with self._lock:
            return self._selected_id

    def get_all_nodes(self) -> list[Node]:
        with self._lock:
            return list(self._nodes)

    def get_node(self, node_id: str) -> Node | None:
        with self._lock:
            for node in self._nodes:
                if node.id == node_id:
                    return node
            return None

    def get_selected_node(self) -> Node | None:
        with self._lock:
            if self._selected_id is None:
                return None
            return self.get_node(self._selected_id)

    def select(self, node_id: str | None) -> None:
        """Select the node with ``node_id``; None clears the selection.

        Raises:
            KeyError: If no node has ``node_id``.
        """
        with self._lock:
            if node_id is not None and self.get_node(node_id) is None:
                raise KeyError(node_id)
            if node_id == self._selected_id:
                return
            self._selected_id = node_id
            notify_now = self._mark_changed()
        if notify_now:
            self._notify()

    def replace_nodes(self, nodes: Iterable[Node]) -> None:
        """Swap in a freshly built node collection, keeping the selected id."""
        with self._lock:
            self._nodes = list(nodes)
            notify_now = self._mark_changed()
        logger.debug("Node collection replaced (%d nodes)", len(self._nodes))
        if notify_now:
            self._notify()

    def commit(self, nodes: Sequence[Node], selected_node: Node | None) -> None:
        """Replace the node collection and the selection in one update."""
        with self._lock:
            self._nodes = list(nodes)
            self._selected_id = selected_node.id if selected_node is not None else None
            notify_now = self._mark_changed()
        logger.debug(
            "Committed %d nodes, selected %s", len(self._nodes), self._selected_id
        )
        if notify_now:
            self._notify()


@contextmanager
def hold_notifications(*stores: Any) -> Iterator[None]:
    """Defer listener calls on ``stores`` until the block exits.

    Stores without listener support (any plain protocol implementation) are
    ignored.  While the block is open the in-memory stores' locks are held, so
    other threads cannot observe a partial update either.  Locks are taken in
    a fixed order whatever the argument order, so concurrent holds over the
    same stores cannot deadlock.  Deferred listeners run in argument order.
    Nested holds flush once, on the outermost exit.
    """
    observable = list(
        {id(s): s for s in stores if isinstance(s, _ObservableStore)}.values()
    )
    held: list[_ObservableStore] = []
    try:
        for store in sorted(observable, key=id):
            store._begin_hold()
            held.append(store)
        yield
    finally:
        flush: set[int] = set()
        for store in reversed(held):
            if store._end_hold():
                flush.add(id(store))
        for store in observable:
            if id(store) in flush:
                store._notify()
