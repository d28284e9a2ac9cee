"""
Array construction and layout primitives.

Each function forwards to NumPy (`np.array`, `np.pad`, `np.concatenate`,
`np.transpose`, `np.reshape`, `np.stack`, indexing) through `apply_op`,
adding only static shape bookkeeping for the symbolic case.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import numpy as np

from ..graph._context import context
from ..graph._operation import Operation
from ..tensor import _shape
from ..tensor._shape import StaticShape, as_static_shape, normalize_axis
from ..tensor._tensor import Tensor
from ..tensor._variable import Variable
from ._op_helpers import apply_op


def constant(
    value: Any,
    dtype: Any = None,
    shape: Optional[Sequence[int]] = None,
    name: str = "Const",
) -> Tensor:
    """
    Create a constant tensor.

    A scalar (or single-element) `value` is broadcast to `shape`; otherwise
    `value` is reshaped to `shape`.
    """
    arr = np.array(value, dtype=dtype)
    if shape is not None:
        shape = tuple(int(d) for d in shape)
        if arr.size == 1:
            arr = np.full(shape, arr.reshape(()), dtype=arr.dtype)
        else:
            arr = arr.reshape(shape)
    return apply_op(
        "Const",
        [],
        lambda: arr,
        dtype=arr.dtype,
        shape=arr.shape,
        name=name,
        attrs={"value": arr},
    )


def constant_value(tensor: Tensor) -> Optional[np.ndarray]:
    """
    Return the value of a tensor produced by a `Const` op, else None.
    """
    if tensor.op.type == "Const":
        return tensor.op.attrs["value"]
    return None


def convert_to_tensor(value: Any, dtype: Any = None) -> Tensor:
    """
    Convert tensors, variables, arrays and Python values to a `Tensor`.

    Raises
    ------
    ValueError
        If `value` is a tensor whose dtype differs from a requested `dtype`.
    """
    if isinstance(value, Variable):
        value = value.value()
    if isinstance(value, Tensor):
        if dtype is not None and value.dtype != np.dtype(dtype):
            raise ValueError(
                f"Tensor conversion requested dtype {np.dtype(dtype).name} for "
                f"tensor with dtype {value.dtype.name}"
            )
        return value
    return constant(value, dtype=dtype)


def placeholder(
    dtype: Any,
    shape: Optional[Sequence[Optional[int]]] = None,
    name: str = "Placeholder",
) -> Tensor:
    """
    Create a placeholder in the current default graph.

    Raises
    ------
    RuntimeError
        If called while executing eagerly.
    """
    if context.executing_eagerly():
        raise RuntimeError("placeholder() is not compatible with eager execution.")
    graph = context.get_default_graph()
    op = Operation("Placeholder", graph.unique_name(name), (), None, graph, {})
    graph.add_operation(op)
    return Tensor(op, dtype=dtype, shape=as_static_shape(shape), graph=graph)


def placeholder_with_default(
    default: Any,
    shape: Optional[Sequence[Optional[int]]] = None,
    name: str = "PlaceholderWithDefault",
) -> Tensor:
    """
    Create a feedable tensor that evaluates to `default` when not fed.
    """
    default_t = convert_to_tensor(default)
    static = as_static_shape(shape) if shape is not None else default_t.shape
    return apply_op(
        "PlaceholderWithDefault",
        [default_t],
        lambda v: v,
        dtype=default_t.dtype,
        shape=static,
        name=name,
    )


def identity(x: Any, name: str = "Identity") -> Tensor:
    x = convert_to_tensor(x)
    return apply_op("Identity", [x], lambda v: v, dtype=x.dtype, shape=x.shape, name=name)


def shape(x: Any, out_type: Any = np.int32, name: str = "Shape") -> Tensor:
    """
    Dynamic shape of `x` as a 1D integer tensor.
    """
    x = convert_to_tensor(x)
    static = None if x.ndim is None else (x.ndim,)
    return apply_op(
        "Shape",
        [x],
        lambda v: np.array(v.shape, dtype=out_type),
        dtype=out_type,
        shape=static,
        name=name,
    )


def strided_slice(x: Any, key: Any, name: str = "StridedSlice") -> Tensor:
    """
    Basic indexing (`x[key]`) forwarded to NumPy.

    The static shape is inferred for a single slice along the first axis of a
    tensor with known leading dim; other keys leave it unknown.
    """
    x = convert_to_tensor(x)
    static: StaticShape = None
    if x.shape is not None and x.shape and x.shape[0] is not None:
        if isinstance(key, slice):
            static = (len(range(x.shape[0])[key]),) + tuple(x.shape[1:])
        elif isinstance(key, int):
            static = tuple(x.shape[1:])
    return apply_op(
        "StridedSlice",
        [x],
        lambda v: v[key],
        dtype=x.dtype,
        shape=static,
        name=name,
    )


def pad(
    x: Any,
    paddings: Sequence[Sequence[int]],
    constant_values: Any = 0,
    name: str = "Pad",
) -> Tensor:
    """
    Pad `x` with `constant_values` according to `paddings` ([[before, after], ...]).

    Raises
    ------
    ValueError
        If `paddings` does not have one (before, after) pair per dimension,
        or contains negative amounts.
    """
    x = convert_to_tensor(x)
    pattern = [tuple(int(v) for v in pair) for pair in paddings]
    if any(len(pair) != 2 for pair in pattern):
        raise ValueError(f"paddings must be pairs of (before, after), got {paddings}")
    if any(v < 0 for pair in pattern for v in pair):
        raise ValueError(f"paddings must be non-negative, got {paddings}")
    if x.ndim is not None and len(pattern) != x.ndim:
        raise ValueError(
            f"paddings must have {x.ndim} rows for a rank-{x.ndim} tensor, "
            f"got {len(pattern)}"
        )

    static: StaticShape = None
    if x.shape is not None:
        static = tuple(
            None if d is None else d + before + after
            for d, (before, after) in zip(x.shape, pattern)
        )
    return apply_op(
        "Pad",
        [x],
        lambda v: np.pad(v, pattern, mode="constant", constant_values=constant_values),
        dtype=x.dtype,
        shape=static,
        name=name,
        attrs={"paddings": pattern},
    )


def concat(values: Sequence[Any], axis: int, name: str = "concat") -> Tensor:
    """
    Concatenate tensors along `axis`.

    Raises
    ------
    ValueError
        If `values` is empty.
    """
    tensors = [convert_to_tensor(v) for v in values]
    if not tensors:
        raise ValueError("concat requires at least one tensor")

    dtype = np.result_type(*[t.dtype for t in tensors])
    static: StaticShape = None
    shapes = [t.shape for t in tensors]
    if all(s is not None for s in shapes):
        rank = len(shapes[0])
        ax = normalize_axis(axis, rank)
        dims: list[Optional[int]] = []
        for i in range(rank):
            col = [s[i] for s in shapes]
            if i == ax:
                dims.append(None if any(d is None for d in col) else sum(col))
            else:
                known = [d for d in col if d is not None]
                dims.append(known[0] if known else None)
        static = tuple(dims)

    return apply_op(
        "ConcatV2",
        tensors,
        lambda *vs: np.concatenate(vs, axis=axis),
        dtype=dtype,
        shape=static,
        name=name,
        attrs={"axis": axis},
    )


def stack(values: Sequence[Any], axis: int = 0, name: str = "stack") -> Tensor:
    """
    Stack equally shaped tensors (or Python scalars) along a new axis.
    """
    tensors = [convert_to_tensor(v) for v in values]
    if not tensors:
        raise ValueError("stack requires at least one tensor")
    dtype = np.result_type(*[t.dtype for t in tensors])
    static: StaticShape = None
    if tensors[0].shape is not None:
        inner = list(tensors[0].shape)
        rank = len(inner) + 1
        inner.insert(normalize_axis(axis, rank), len(tensors))
        static = tuple(inner)
    return apply_op(
        "Pack",
        tensors,
        lambda *vs: np.stack([np.asarray(v, dtype=dtype) for v in vs], axis=axis),
        dtype=dtype,
        shape=static,
        name=name,
    )


def transpose(x: Any, perm: Sequence[int], name: str = "transpose") -> Tensor:
    """
    Permute the dimensions of `x`.

    Raises
    ------
    ValueError
        If `perm` is not a permutation of the tensor's axes.
    """
    x = convert_to_tensor(x)
    perm = tuple(int(p) for p in perm)
    if sorted(perm) != list(range(len(perm))):
        raise ValueError(f"perm must be a permutation of axes, got {perm}")
    if x.ndim is not None and len(perm) != x.ndim:
        raise ValueError(f"perm {perm} does not match rank {x.ndim}")
    static = None if x.shape is None else tuple(x.shape[p] for p in perm)
    return apply_op(
        "Transpose",
        [x],
        lambda v: np.transpose(v, perm),
        dtype=x.dtype,
        shape=static,
        name=name,
        attrs={"perm": perm},
    )


def reshape(x: Any, shape: Any, name: str = "Reshape") -> Tensor:
    """
    Reshape `x` to `shape`, which may be a sequence (with at most one -1) or
    an integer tensor.
    """
    x = convert_to_tensor(x)
    if isinstance(shape, (Tensor, Variable)):
        shape_t = convert_to_tensor(shape)
        static: StaticShape = None
        if shape_t.shape is not None and shape_t.shape[0] is not None:
            static = (None,) * shape_t.shape[0]
        return apply_op(
            "Reshape",
            [x, shape_t],
            lambda v, s: np.reshape(v, tuple(int(d) for d in s)),
            dtype=x.dtype,
            shape=static,
            name=name,
        )

    target = tuple(int(d) for d in shape)
    if sum(1 for d in target if d == -1) > 1:
        raise ValueError(f"Only one dimension of {target} may be -1")
    static = tuple(None if d == -1 else d for d in target)
    if x.shape is not None and all(d is not None for d in x.shape) and -1 in target:
        known = int(np.prod([d for d in target if d != -1]))
        total = int(np.prod(x.shape))
        if known:
            static = tuple(total // known if d == -1 else d for d in target)
    return apply_op(
        "Reshape",
        [x],
        lambda v: np.reshape(v, target),
        dtype=x.dtype,
        shape=static,
        name=name,
    )


def where(condition: Any, x: Any, y: Any, name: str = "SelectV2") -> Tensor:
    """
    Elementwise selection forwarded to `np.where`.
    """
    c = convert_to_tensor(condition)
    x = convert_to_tensor(x)
    y = convert_to_tensor(y, dtype=x.dtype) if not isinstance(y, Tensor) else y
    static = _shape.broadcast(_shape.broadcast(c.shape, x.shape), y.shape)
    return apply_op(
        "SelectV2",
        [c, x, y],
        lambda cv, xv, yv: np.where(cv, xv, yv),
        dtype=np.result_type(x.dtype, y.dtype),
        shape=static,
        name=name,
    )

