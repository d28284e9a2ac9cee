"""
Mutable, graph-bound state.

A `Variable` owns a NumPy buffer and is bound to the graph that was the
default when it was created. Variables created while the outermost context is
eager (function graphs included) are
initialized immediately. Variables created in graph mode stay uninitialized
until their `initializer` tensor is run by a session; reading them earlier
raises `UninitializedVariableError`.
"""

from __future__ import annotations

from typing import Any, Optional

import numpy as np

from ...domain._errors import UninitializedVariableError
from ..graph._context import context
from ..graph._graph import Graph
from ..graph._operation import Operation
from ._tensor import Tensor


class Variable:
    """
    NumPy-backed variable.

    Parameters
    ----------
    initial_value : array-like
        Initial contents; copied.
    dtype : Optional[dtype-like]
        Element dtype. Defaults to the dtype NumPy infers for `initial_value`.
    name : Optional[str]
        Base name, made unique within the owning graph.
    trainable : bool, default True
        Informational flag carried for callers.
    """

    def __init__(
        self,
        initial_value: Any,
        dtype: Any = None,
        name: Optional[str] = None,
        trainable: bool = True,
    ) -> None:
        if isinstance(initial_value, (Tensor, Variable)):
            initial_value = initial_value.numpy()
        init = np.array(initial_value, dtype=dtype)

        self._graph: Graph = context.get_default_graph()
        self.name = self._graph.unique_name(name or "Variable")
        self.trainable = trainable
        self._initial_value = init
        self._value: Optional[np.ndarray] = (
            init.copy() if context.executing_eagerly_outside_functions() else None
        )

        op = Operation(
            type="AssignVariableOp",
            name=self._graph.unique_name(f"{self.name}/Assign"),
            compute=self._initialize,
            graph=self._graph,
        )
        self._graph.add_operation(op)
        self.initializer = Tensor(
            op, dtype=init.dtype, shape=init.shape, graph=self._graph
        )

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def dtype(self) -> np.dtype:
        return self._initial_value.dtype

    @property
    def shape(self) -> tuple[int, ...]:
        return tuple(self._initial_value.shape)

    @property
    def ndim(self) -> int:
        return self._initial_value.ndim

    @property
    def initialized(self) -> bool:
        return self._value is not None

    def _initialize(self) -> np.ndarray:
        self._value = self._initial_value.copy()
        return self._value

    def _read(self) -> np.ndarray:
        if self._value is None:
            raise UninitializedVariableError(self.name)
        return self._value.copy()

    def numpy(self) -> np.ndarray:
        """
        Return a copy of the current value.

        Raises
        ------
        UninitializedVariableError
            If the variable has not been initialized yet.
        """
        return self._read()

    def value(self) -> Tensor:
        """
        Return a tensor reading the variable.

        Eagerly this is a snapshot; in graph mode the read happens when the
        tensor is evaluated.
        """
        from ..ops._op_helpers import apply_op

        return apply_op(
            "ReadVariableOp",
            [],
            self._read,
            dtype=self.dtype,
            shape=self.shape,
            name=f"{self.name}/Read",
        )

    read_value = value

    def assign(self, value: Any, read_value: bool = True) -> Optional[Tensor]:
        """
        Assign a new value.

        Eagerly the assignment happens immediately and the new value is
        returned as a tensor when `read_value` is True. In graph mode an
        `AssignVariableOp` tensor is returned that performs the assignment
        when evaluated.

        Raises
        ------
        ValueError
            If `value` does not match the variable's shape.
        """
        if isinstance(value, Variable):
            value = value.numpy()

        if isinstance(value, Tensor) and value.is_symbolic:
            from ..ops._op_helpers import apply_op

            self._check_shape(value.shape)
            return apply_op(
                "AssignVariableOp",
                [value],
                self._assign_array,
                dtype=self.dtype,
                shape=self.shape,
                name=f"{self.name}/Assign",
            )

        arr = np.asarray(value, dtype=self.dtype)
        self._check_shape(arr.shape)
        if context.executing_eagerly_outside_functions():
            self._assign_array(arr)
            return self.value() if read_value else None

        from ..ops._op_helpers import apply_op

        return apply_op(
            "AssignVariableOp",
            [],
            lambda: self._assign_array(arr),
            dtype=self.dtype,
            shape=self.shape,
            name=f"{self.name}/Assign",
        )

    def _assign_array(self, arr: np.ndarray) -> np.ndarray:
        self._value = np.array(arr, dtype=self.dtype)
        return self._value

    def _check_shape(self, shape: Any) -> None:
        if shape is None:
            return
        shape = tuple(shape)
        if len(shape) != len(self.shape) or any(
            d is not None and d != e for d, e in zip(shape, self.shape)
        ):
            raise ValueError(
                f"Cannot assign value of shape {shape} to variable "
                f"'{self.name}' of shape {self.shape}."
            )

    def __array__(self, dtype: Any = None, copy: Any = None) -> np.ndarray:
        value = self.numpy()
        return value if dtype is None else value.astype(dtype)

    def __repr__(self) -> str:
        return f"<Variable '{self.name}' shape={self.shape} dtype={self.dtype.name}>"
