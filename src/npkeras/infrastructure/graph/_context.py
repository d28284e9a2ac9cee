"""
Process-wide execution context.

The execution context answers two questions for every operation the backend
forwards:

1. Is the caller executing eagerly (compute NumPy values now) or building a
   graph (record a symbolic operation)?
2. Which graph is the current default graph?

Eager execution is enabled by default. Entering `Graph.as_default()` pushes
the graph on a stack; while the stack is non-empty the context is not
executing eagerly. `disable_eager_execution()` switches the whole process to
graph mode, in which operations are recorded in the global default graph.

A single module-level `context` instance is shared by the whole package.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

from ._graph import FuncGraph, Graph

if TYPE_CHECKING:
    from ._session import Session


class ExecutionContext:
    """
    Tracks eager/graph mode, the default-graph stack and the default session.
    """

    def __init__(self) -> None:
        self._eager_enabled = True
        self._mode_stack: list[bool] = []
        self._graph_stack: list[Graph] = []
        self._default_graph = Graph("default_graph")
        self._default_session: Optional["Session"] = None

    # ------------------------------------------------------------------
    # Mode
    # ------------------------------------------------------------------
    def executing_eagerly(self) -> bool:
        """
        Return True when operations execute immediately.
        """
        return self._eager_enabled and not self._graph_stack

    def executing_eagerly_outside_functions(self) -> bool:
        """
        Return True when the outermost context is eager.

        Function graphs (`FuncGraph`) entered from an eager context do not
        change the answer; entering a plain `Graph` does.
        """
        if not self._eager_enabled:
            return False
        return all(isinstance(g, FuncGraph) for g in self._graph_stack)

    def enable_eager_execution(self) -> None:
        self._eager_enabled = True

    def disable_eager_execution(self) -> None:
        self._eager_enabled = False

    def switch_to(self, eager: bool) -> None:
        """
        Push the current mode and switch to `eager`; undo with `restore_mode`.
        """
        self._mode_stack.append(self._eager_enabled)
        self._eager_enabled = eager

    def restore_mode(self) -> None:
        """
        Restore the mode saved by the latest `switch_to`, if any.
        """
        if self._mode_stack:
            self._eager_enabled = self._mode_stack.pop()

    @contextmanager
    def eager_mode(self) -> Iterator[None]:
        self.switch_to(True)
        try:
            yield
        finally:
            self.restore_mode()

    @contextmanager
    def graph_mode(self) -> Iterator[None]:
        self.switch_to(False)
        try:
            yield
        finally:
            self.restore_mode()

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------
    def get_default_graph(self) -> Graph:
        if self._graph_stack:
            return self._graph_stack[-1]
        return self._default_graph

    def push_graph(self, graph: Graph) -> None:
        self._graph_stack.append(graph)

    def pop_graph(self, graph: Graph) -> None:
        if not self._graph_stack or self._graph_stack[-1] is not graph:
            raise RuntimeError(
                f"Graph stack corrupted: expected {graph!r} on top of the stack."
            )
        self._graph_stack.pop()

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------
    def get_default_session(self) -> Optional["Session"]:
        return self._default_session

    def set_default_session(self, session: Optional["Session"]) -> None:
        self._default_session = session

    def reset_context(self) -> None:
        """
        Drop all graphs, mode overrides and the default session.

        A fresh global default graph is created; the eager flag itself is
        left untouched.
        """
        self._graph_stack.clear()
        self._mode_stack.clear()
        self._default_graph = Graph("default_graph")
        self._default_session = None


context = ExecutionContext()


def executing_eagerly() -> bool:
    return context.executing_eagerly()


def get_default_graph() -> Graph:
    return context.get_default_graph()
