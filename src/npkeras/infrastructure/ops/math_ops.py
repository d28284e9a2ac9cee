"""
Elementwise and reduction primitives forwarded to NumPy.

Python scalars and arrays mixed with tensors are converted to the tensor's
dtype before the NumPy call, so `1.0 - t` keeps `t.dtype` instead of being
promoted by NumPy's scalar rules.
"""

from __future__ import annotations

from typing import Any, Callable, Optional, Sequence, Union

import numpy as np

from ..tensor import _shape
from ..tensor._tensor import Tensor
from ._op_helpers import apply_op, is_tensor_like
from .array_ops import convert_to_tensor

Axis = Union[None, int, Sequence[int]]


def _coerce_pair(x: Any, y: Any) -> tuple[Tensor, Tensor]:
    if is_tensor_like(x) and not is_tensor_like(y):
        x = convert_to_tensor(x)
        return x, convert_to_tensor(y, dtype=x.dtype)
    if is_tensor_like(y) and not is_tensor_like(x):
        y = convert_to_tensor(y)
        return convert_to_tensor(x, dtype=y.dtype), y
    return convert_to_tensor(x), convert_to_tensor(y)


def _binary(
    op_type: str,
    fn: Callable[[np.ndarray, np.ndarray], np.ndarray],
    x: Any,
    y: Any,
    dtype: Any = None,
) -> Tensor:
    x, y = _coerce_pair(x, y)
    out_dtype = dtype if dtype is not None else np.result_type(x.dtype, y.dtype)
    return apply_op(
        op_type,
        [x, y],
        fn,
        dtype=out_dtype,
        shape=_shape.broadcast(x.shape, y.shape),
    )


def _unary(
    op_type: str, fn: Callable[[np.ndarray], np.ndarray], x: Any, dtype: Any = None
) -> Tensor:
    x = convert_to_tensor(x)
    return apply_op(
        op_type,
        [x],
        fn,
        dtype=x.dtype if dtype is None else dtype,
        shape=x.shape,
    )


def add(x: Any, y: Any) -> Tensor:
    return _binary("AddV2", np.add, x, y)


def subtract(x: Any, y: Any) -> Tensor:
    return _binary("Sub", np.subtract, x, y)


def multiply(x: Any, y: Any) -> Tensor:
    return _binary("Mul", np.multiply, x, y)


def truediv(x: Any, y: Any) -> Tensor:
    return _binary("RealDiv", np.true_divide, x, y)


def maximum(x: Any, y: Any) -> Tensor:
    return _binary("Maximum", np.maximum, x, y)


def not_equal(x: Any, y: Any) -> Tensor:
    return _binary("NotEqual", np.not_equal, x, y, dtype=np.bool_)


def negative(x: Any) -> Tensor:
    return _unary("Neg", np.negative, x)


def log(x: Any) -> Tensor:
    return _unary("Log", np.log, x)


def exp(x: Any) -> Tensor:
    return _unary("Exp", np.exp, x)


def cast(x: Any, dtype: Any) -> Tensor:
    """
    Cast `x` to `dtype`; a no-op when the dtype already matches.
    """
    x = convert_to_tensor(x)
    dtype = np.dtype(dtype)
    if x.dtype == dtype:
        return x
    return _unary("Cast", lambda v: v.astype(dtype), x, dtype=dtype)


def clip_by_value(t: Any, clip_value_min: Any, clip_value_max: Any) -> Tensor:
    """
    Clip `t` elementwise to [clip_value_min, clip_value_max].
    """
    t = convert_to_tensor(t)
    lo = _coerce_pair(t, clip_value_min)[1]
    hi = _coerce_pair(t, clip_value_max)[1]
    return apply_op(
        "ClipByValue",
        [t, lo, hi],
        lambda v, a, b: np.clip(v, a, b),
        dtype=t.dtype,
        shape=t.shape,
    )


def _axis_arg(axis: Axis) -> Optional[Union[int, tuple[int, ...]]]:
    if axis is None or isinstance(axis, int):
        return axis
    return tuple(int(a) for a in axis)


def _reduction(
    op_type: str, fn: Callable[..., np.ndarray], x: Any, axis: Axis, keepdims: bool
) -> Tensor:
    x = convert_to_tensor(x)
    ax = _axis_arg(axis)
    return apply_op(
        op_type,
        [x],
        lambda v: fn(v, axis=ax, keepdims=keepdims),
        dtype=x.dtype,
        shape=_shape.reduce(x.shape, ax, keepdims),
        attrs={"axis": ax, "keepdims": keepdims},
    )


def reduce_sum(x: Any, axis: Axis = None, keepdims: bool = False) -> Tensor:
    return _reduction("Sum", np.sum, x, axis, keepdims)


def reduce_mean(x: Any, axis: Axis = None, keepdims: bool = False) -> Tensor:
    return _reduction("Mean", np.mean, x, axis, keepdims)


def reduce_max(x: Any, axis: Axis = None, keepdims: bool = False) -> Tensor:
    return _reduction("Max", np.max, x, axis, keepdims)
