"""
Tensor handle used throughout the backend.

A `Tensor` is either:

- **eager**: it owns a concrete NumPy value (`graph is None`), or
- **symbolic**: it belongs to a graph and only knows its dtype and static
  shape; its value is produced on demand by `Session.run` or a
  `ConcreteFunction`.

Both flavors carry the `Operation` that produced them, so backend code can
inspect producers (e.g. recognize a `Softmax` output) regardless of mode.

Arithmetic operators forward to `ops.math_ops`, and indexing forwards to
`ops.array_ops.strided_slice`; no computation lives in this module.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional

import numpy as np

from ...domain._errors import SymbolicTensorError
from ._shape import StaticShape, as_static_shape, merge

if TYPE_CHECKING:
    from ..graph._graph import Graph
    from ..graph._operation import Operation


class Tensor:
    """
    Eager or symbolic tensor.

    Parameters
    ----------
    op : Operation
        The operation that produced this tensor.
    dtype : np.dtype-like
        Element dtype.
    shape : StaticShape
        Static shape; ignored for eager tensors (the value's shape is used).
    value : Optional[np.ndarray]
        Concrete value for eager tensors.
    graph : Optional[Graph]
        Owning graph; None for eager tensors.
    """

    def __init__(
        self,
        op: "Operation",
        *,
        dtype: Any,
        shape: StaticShape = None,
        value: Optional[np.ndarray] = None,
        graph: Optional["Graph"] = None,
    ) -> None:
        self._op = op
        self._graph = graph
        self._value = value
        if value is not None:
            self._dtype = value.dtype
            self._shape: StaticShape = tuple(value.shape)
        else:
            self._dtype = np.dtype(dtype)
            self._shape = as_static_shape(shape)
        self.keras_mask: Optional["Tensor"] = None

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------
    @property
    def op(self) -> "Operation":
        return self._op

    @property
    def graph(self) -> Optional["Graph"]:
        return self._graph

    @property
    def name(self) -> str:
        return f"{self._op.name}:0"

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def shape(self) -> StaticShape:
        """
        Static shape: a tuple with None for unknown dims, or None if the
        rank is unknown.
        """
        return self._shape

    @shape.setter
    def shape(self, value: Iterable[Optional[int]]) -> None:
        self.set_shape(value)

    def set_shape(self, shape: Optional[Iterable[Optional[int]]]) -> None:
        """
        Refine the static shape; -1 / None entries mean "unknown".

        Raises
        ------
        ValueError
            If `shape` is incompatible with what is already known.
        """
        self._shape = merge(self._shape, as_static_shape(shape))

    @property
    def ndim(self) -> Optional[int]:
        return None if self._shape is None else len(self._shape)

    @property
    def is_symbolic(self) -> bool:
        return self._value is None

    def numpy(self) -> np.ndarray:
        """
        Return the concrete value of an eager tensor.

        Raises
        ------
        SymbolicTensorError
            If this tensor is symbolic.
        """
        if self._value is None:
            raise SymbolicTensorError(self.name)
        return self._value

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        value = self.numpy()
        return value if dtype is None else value.astype(dtype)

    def __len__(self) -> int:
        if self._shape is None or not self._shape or self._shape[0] is None:
            raise TypeError("len() of a tensor with unknown or scalar leading dim")
        return self._shape[0]

    def __bool__(self) -> bool:
        return bool(self.numpy())

    def __repr__(self) -> str:
        if self._value is not None:
            return (
                f"<Tensor: shape={self._shape}, dtype={self._dtype.name}, "
                f"numpy={self._value!r}>"
            )
        return f"<Tensor '{self.name}' shape={self._shape} dtype={self._dtype.name}>"

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------
    def __add__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.add(self, other)

    def __radd__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.add(other, self)

    def __sub__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.subtract(self, other)

    def __rsub__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.subtract(other, self)

    def __mul__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.multiply(self, other)

    def __rmul__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.multiply(other, self)

    def __truediv__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.truediv(self, other)

    def __rtruediv__(self, other: Any) -> "Tensor":
        from ..ops import math_ops

        return math_ops.truediv(other, self)

    def __neg__(self) -> "Tensor":
        from ..ops import math_ops

        return math_ops.negative(self)

    def __getitem__(self, key: Any) -> "Tensor":
        from ..ops import array_ops

        return array_ops.strided_slice(self, key)
