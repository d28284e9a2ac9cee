"""
Graph, tensor and variable interface definitions.

This module defines the domain-level contracts the backend adapter relies on
using structural typing. The backend only needs a handful of properties from
the objects it forwards (graph identity, static shapes, producing operation
type, variable assignment), so the protocols below capture exactly that
surface and nothing more.

Notes
-----
Using `typing.Protocol` keeps the backend decoupled from the concrete graph
and tensor classes in the infrastructure layer, which makes it possible to
substitute lightweight fakes in tests.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

StaticShape = Optional[tuple[Optional[int], ...]]


@runtime_checkable
class IOperation(Protocol):
    """
    Record of the operation that produced a tensor.
    """

    type: str
    name: str

    @property
    def inputs(self) -> Sequence["ITensor"]: ...


@runtime_checkable
class IGraph(Protocol):
    """
    Graph handle contract.

    A graph is an identity: bookkeeping tables in the backend are keyed by
    graph objects, and `graph_key` provides a stable string form of that
    identity.
    """

    name: str

    @property
    def graph_key(self) -> str: ...

    def unique_name(self, name: str) -> str: ...


@runtime_checkable
class ITensor(Protocol):
    """
    Tensor contract used by the backend.

    Attributes are deliberately minimal: static shape/dtype information for
    argument special-casing, plus the producing operation and owning graph
    for graph bookkeeping.
    """

    @property
    def shape(self) -> StaticShape: ...

    @property
    def ndim(self) -> Optional[int]: ...

    @property
    def dtype(self) -> Any: ...

    @property
    def op(self) -> IOperation: ...

    @property
    def graph(self) -> Optional[IGraph]: ...

    def numpy(self) -> Any: ...


@runtime_checkable
class IVariable(Protocol):
    """
    Mutable, graph-bound state contract.
    """

    name: str

    @property
    def graph(self) -> IGraph: ...

    @property
    def dtype(self) -> Any: ...

    def assign(self, value: Any, read_value: bool = True) -> Any: ...

    def numpy(self) -> Any: ...
