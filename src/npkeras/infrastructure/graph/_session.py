"""
Evaluation of symbolic tensors.

Symbolic tensors are evaluated by replaying the NumPy `compute` callables
recorded on their producing operations, depth-first, memoizing each tensor's
value for the duration of one evaluation. Eager tensors encountered along the
way contribute their concrete values.

Public pieces
-------------
- `evaluate`        : evaluate a list of tensors given optional feeds
- `Session`         : graph-bound runner with `run(fetches, feed_dict)`
- `ConcreteFunction`: callable wrapper around a `FuncGraph`
- `lift_to_graph`   : record a tensor closure as captured by a `FuncGraph`
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Optional, Sequence, Union

import numpy as np
from typing_extensions import Self

from ...domain._errors import GraphMismatchError, PlaceholderNotFedError
from ._context import context
from ._graph import FuncGraph, Graph

if TYPE_CHECKING:
    from ..tensor._tensor import Tensor

_PLACEHOLDER_TYPES = ("Placeholder",)
_CAPTURE_SOURCE_TYPES = ("Placeholder", "PlaceholderWithDefault", "ReadVariableOp")


def evaluate(
    fetches: Sequence["Tensor"],
    feed_dict: Optional[Mapping["Tensor", Any]] = None,
) -> list[np.ndarray]:
    """
    Evaluate `fetches` and return their NumPy values in order.

    Parameters
    ----------
    fetches : Sequence[Tensor]
        Tensors to evaluate.
    feed_dict : Optional[Mapping[Tensor, Any]]
        Values overriding tensors (typically placeholders).

    Raises
    ------
    PlaceholderNotFedError
        If a placeholder without a feed is reached.
    """
    feeds: dict[int, np.ndarray] = {}
    for tensor, value in (feed_dict or {}).items():
        feeds[id(tensor)] = np.asarray(value, dtype=tensor.dtype)

    cache: dict[int, np.ndarray] = {}

    def _eval(t: "Tensor") -> np.ndarray:
        key = id(t)
        if key in cache:
            return cache[key]
        if key in feeds:
            value = feeds[key]
        elif t.graph is None:
            value = t.numpy()
        else:
            op = t.op
            if op.type in _PLACEHOLDER_TYPES or op.compute is None:
                raise PlaceholderNotFedError(t.name)
            value = np.asarray(op.compute(*[_eval(i) for i in op.inputs]))
        cache[key] = value
        return value

    return [_eval(t) for t in fetches]


class Session:
    """
    Graph-bound evaluator.

    Parameters
    ----------
    graph : Optional[Graph]
        Graph to bind to. Defaults to the context's current default graph.
    """

    def __init__(self, graph: Optional[Graph] = None) -> None:
        self.graph = graph if graph is not None else context.get_default_graph()
        self._closed = False

    def run(
        self,
        fetches: Union["Tensor", Sequence["Tensor"]],
        feed_dict: Optional[Mapping["Tensor", Any]] = None,
    ) -> Union[np.ndarray, list[np.ndarray]]:
        """
        Evaluate one tensor or a list/tuple of tensors.

        Returns a single array for a single fetch, else a list of arrays.

        Raises
        ------
        RuntimeError
            If the session has been closed.
        GraphMismatchError
            If a fetch belongs to a different graph.
        """
        if self._closed:
            raise RuntimeError("Attempted to use a closed Session.")

        single = not isinstance(fetches, (list, tuple))
        items = [fetches] if single else list(fetches)
        items = [_as_tensor(f) for f in items]
        for t in items:
            if t.graph is not None and t.graph is not self.graph:
                raise GraphMismatchError(t.name, self.graph.name)

        values = evaluate(items, feed_dict)
        return values[0] if single else values

    def close(self) -> None:
        self._closed = True

    @contextmanager
    def as_default(self) -> Iterator["Session"]:
        previous = context.get_default_session()
        context.set_default_session(self)
        try:
            yield self
        finally:
            context.set_default_session(previous)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Session graph={self.graph!r}>"


class ConcreteFunction:
    """
    Callable view of a `FuncGraph`.

    Calling the function feeds `graph.inputs` positionally and evaluates
    `graph.outputs`. When an input is an internal capture, the fed value is
    also used for the external tensor it stands in for.
    """

    def __init__(self, graph: FuncGraph) -> None:
        self.graph = graph

    def __call__(self, *args: Any) -> list[np.ndarray]:
        if args and len(args) != len(self.graph.inputs):
            raise ValueError(
                f"Expected {len(self.graph.inputs)} positional inputs, got {len(args)}."
            )
        feeds: dict["Tensor", Any] = {}
        if args:
            internal_to_external = {
                id(internal): external
                for external, internal in zip(
                    self.graph.external_captures, self.graph.internal_captures
                )
            }
            for tensor, value in zip(self.graph.inputs, args):
                feeds[tensor] = value
                external = internal_to_external.get(id(tensor))
                if external is not None:
                    feeds[external] = value
        return evaluate(self.graph.outputs, feeds)


def lift_to_graph(
    tensors: Sequence["Tensor"],
    graph: FuncGraph,
    sources: Optional[Sequence["Tensor"]] = None,
    add_sources: bool = False,
    handle_captures: bool = False,
    base_graph: Optional[Graph] = None,
) -> dict["Tensor", "Tensor"]:
    """
    Record the closure of `tensors` as used by `graph`.

    Operations are not copied: tensors keep their identity, so the returned
    map is the identity on every visited tensor. With `handle_captures`,
    source tensors (placeholders and variable reads) that live in
    `base_graph` are captured by `graph`; with `add_sources`, explicit
    `sources` are captured as well.
    """
    lifted: dict["Tensor", "Tensor"] = {}
    stack = list(tensors)
    visited: set[int] = set()
    while stack:
        t = stack.pop()
        if id(t) in visited:
            continue
        visited.add(id(t))
        lifted[t] = t
        if (
            handle_captures
            and t.op.type in _CAPTURE_SOURCE_TYPES
            and (base_graph is None or t.graph is base_graph)
        ):
            graph.capture(t)
        stack.extend(t.op.inputs)

    if add_sources:
        for s in sources or ():
            graph.capture(s)
            lifted.setdefault(s, s)
    return lifted


def _as_tensor(value: Any) -> "Tensor":
    from ..ops.array_ops import convert_to_tensor

    return convert_to_tensor(value)
