"""
Operation records.

An `Operation` records how a tensor was produced: the operation type name,
its input tensors, operation attributes, and the NumPy callable that computes
its value from the input values. Eager tensors carry an operation record too
(with `graph=None`), which lets backend code inspect producers uniformly,
e.g. to recognize that a probability tensor came out of a `Softmax`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Sequence

if TYPE_CHECKING:
    from ..tensor._tensor import Tensor
    from ._graph import Graph


@dataclass
class Operation:
    """
    Record of an operation producing a single tensor.

    Attributes
    ----------
    type : str
        Operation type name (e.g. "Const", "Placeholder", "Softmax").
    name : str
        Operation name, unique within its graph.
    inputs : Sequence[Tensor]
        Input tensors in positional order.
    compute : Optional[Callable[..., Any]]
        Callable mapping NumPy input values to the NumPy output value.
        None for operations that can only be fed (placeholders).
    graph : Optional[Graph]
        Owning graph, or None for eager operations.
    attrs : dict[str, Any]
        Static attributes (axis, perm, constant value, etc.).
    """

    type: str
    name: str
    inputs: Sequence["Tensor"] = field(default_factory=tuple)
    compute: Optional[Callable[..., Any]] = None
    graph: Optional["Graph"] = None
    attrs: dict[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"<Operation '{self.name}' type={self.type}>"
