"""
Graph handles.

`Graph` is an identity plus a little metadata: an operation list and a
per-graph unique-name counter. It does not schedule or optimize anything;
evaluation of symbolic tensors happens in `Session` / `ConcreteFunction` by
replaying the NumPy `compute` callables recorded on each operation.

`FuncGraph` is the graph flavor used for function-like scopes (the backend's
"keras_graph" and "keras_scratch_graph"). It additionally tracks explicit
inputs/outputs and the tensors it captured from outer graphs.
"""

from __future__ import annotations

import itertools
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator, Optional

from ._operation import Operation

if TYPE_CHECKING:
    from ..tensor._tensor import Tensor


class Graph:
    """
    Concrete graph handle.

    Parameters
    ----------
    name : str, default "graph"
        Human-readable graph name.

    Notes
    -----
    Graphs hash and compare by identity so they can key the backend's
    per-graph bookkeeping tables (including weak-keyed ones).
    """

    _ids = itertools.count(1)

    def __init__(self, name: str = "graph") -> None:
        self.name = name
        self._id = next(Graph._ids)
        self._operations: list[Operation] = []
        self._name_counts: dict[str, int] = {}

    @property
    def graph_key(self) -> str:
        """
        Stable string identity of this graph.
        """
        return f"grap-key-{self._id}/"

    def unique_name(self, name: str) -> str:
        """
        Return `name` made unique within this graph.

        The first request for a name returns it unchanged; later requests
        return "name_1", "name_2", and so on.
        """
        count = self._name_counts.get(name, 0)
        self._name_counts[name] = count + 1
        if count == 0:
            return name
        return f"{name}_{count}"

    def add_operation(self, op: Operation) -> None:
        self._operations.append(op)

    def get_operations(self) -> list[Operation]:
        return list(self._operations)

    def get_operation_by_name(self, name: str) -> Operation:
        for op in self._operations:
            if op.name == name:
                return op
        raise KeyError(f"The name '{name}' refers to an Operation not in the graph.")

    @contextmanager
    def as_default(self) -> Iterator["Graph"]:
        """
        Make this graph the default graph for the duration of the block.

        While any graph is the default, the execution context is not executing
        eagerly and newly created operations are recorded in this graph.
        """
        from ._context import context

        context.push_graph(self)
        try:
            yield self
        finally:
            context.pop_graph(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} '{self.name}' key={self.graph_key}>"


class FuncGraph(Graph):
    """
    Graph with explicit inputs/outputs and captured outer tensors.

    Attributes
    ----------
    inputs : list[Tensor]
        Tensors treated as the function's positional inputs.
    outputs : list[Tensor]
        Tensors the function returns.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.inputs: list["Tensor"] = []
        self.outputs: list["Tensor"] = []
        self._captures: dict[int, tuple["Tensor", "Tensor"]] = {}

    @property
    def external_captures(self) -> list["Tensor"]:
        """Outer tensors captured by this graph, in capture order."""
        return [external for external, _ in self._captures.values()]

    @property
    def internal_captures(self) -> list["Tensor"]:
        """Placeholders standing in for the captured outer tensors."""
        return [internal for _, internal in self._captures.values()]

    def capture(self, tensor: "Tensor", name: Optional[str] = None) -> "Tensor":
        """
        Capture an outer tensor, returning its internal placeholder.

        Capturing the same tensor twice returns the same placeholder.
        """
        key = id(tensor)
        if key in self._captures:
            return self._captures[key][1]

        from ..ops.array_ops import placeholder

        with self.as_default():
            internal = placeholder(
                dtype=tensor.dtype,
                shape=tensor.shape,
                name=name or f"{tensor.op.name}_capture",
            )
        self._captures[key] = (tensor, internal)
        return internal

    def captured(self, tensor: "Tensor") -> bool:
        return id(tensor) in self._captures
