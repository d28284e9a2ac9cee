"""
Shared plumbing for NumPy-forwarding operations.

Every backend primitive funnels through `apply_op`, which decides between the
two execution modes:

- If the operation ends up outside any graph (eager), the NumPy `compute`
  callable runs immediately on the input values and an eager `Tensor` is
  returned.
- Otherwise an `Operation` is recorded in the owning graph and a symbolic
  `Tensor` with the caller-provided static dtype/shape is returned.

The owning graph is the graph of the first symbolic input; when all inputs
are eager it is the default graph if the context is not executing eagerly,
and None (eager) otherwise.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence

import numpy as np

from ..graph._context import context
from ..graph._graph import Graph
from ..graph._operation import Operation
from ..tensor._shape import StaticShape
from ..tensor._tensor import Tensor


def resolve_graph(inputs: Sequence[Tensor]) -> Optional[Graph]:
    """
    Return the graph an operation on `inputs` belongs to, or None for eager.
    """
    for t in inputs:
        if t.graph is not None:
            return t.graph
    if context.executing_eagerly():
        return None
    return context.get_default_graph()


def apply_op(
    op_type: str,
    inputs: Sequence[Tensor],
    compute: Callable[..., Any],
    *,
    dtype: Any,
    shape: StaticShape = None,
    name: Optional[str] = None,
    attrs: Optional[dict[str, Any]] = None,
) -> Tensor:
    """
    Create the output tensor of an operation.

    Parameters
    ----------
    op_type : str
        Operation type name.
    inputs : Sequence[Tensor]
        Input tensors.
    compute : Callable[..., Any]
        NumPy function of the input values producing the output value.
    dtype : dtype-like
        Output dtype (used for symbolic outputs and to coerce eager ones).
    shape : StaticShape
        Static output shape for symbolic outputs.
    name : Optional[str]
        Operation name; defaults to `op_type`.
    attrs : Optional[dict[str, Any]]
        Operation attributes.
    """
    inputs = tuple(inputs)
    graph = resolve_graph(inputs)
    attrs = dict(attrs or {})

    if graph is None:
        value = np.asarray(compute(*[t.numpy() for t in inputs]))
        if dtype is not None and value.dtype != np.dtype(dtype):
            value = value.astype(dtype)
        op = Operation(op_type, name or op_type, inputs, compute, None, attrs)
        return Tensor(op, dtype=value.dtype, value=value)

    op = Operation(
        op_type, graph.unique_name(name or op_type), inputs, compute, graph, attrs
    )
    graph.add_operation(op)
    return Tensor(op, dtype=dtype, shape=shape, graph=graph)


def is_tensor_like(value: Any) -> bool:
    from ..tensor._variable import Variable

    return isinstance(value, (Tensor, Variable))
