"""
Static shape helpers.

Static shapes are tuples whose entries are ints or None (unknown dimension);
a static shape of None means the rank itself is unknown. These helpers keep
the symbolic side of the adapter honest without evaluating anything.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence, Union

from ...domain._graph import StaticShape

Axis = Union[None, int, Sequence[int]]


def as_static_shape(shape: Union[None, Iterable[Optional[int]]]) -> StaticShape:
    """
    Normalize a user-facing shape; negative dims are treated as unknown.
    """
    if shape is None:
        return None
    out: list[Optional[int]] = []
    for d in shape:
        if d is None:
            out.append(None)
        else:
            d = int(d)
            out.append(None if d < 0 else d)
    return tuple(out)


def is_fully_defined(shape: StaticShape) -> bool:
    return shape is not None and all(d is not None for d in shape)


def is_compatible(a: StaticShape, b: StaticShape) -> bool:
    """
    Return True when two static shapes could describe the same array.
    """
    if a is None or b is None:
        return True
    if len(a) != len(b):
        return False
    return all(x is None or y is None or x == y for x, y in zip(a, b))


def merge(a: StaticShape, b: StaticShape) -> StaticShape:
    """
    Merge two compatible static shapes, keeping the most specific dims.

    Raises
    ------
    ValueError
        If the shapes are incompatible.
    """
    if not is_compatible(a, b):
        raise ValueError(f"Shapes {a} and {b} are incompatible")
    if a is None:
        return b
    if b is None:
        return a
    return tuple(x if x is not None else y for x, y in zip(a, b))


def normalize_axis(axis: int, rank: int) -> int:
    """
    Map a possibly negative axis into [0, rank).

    Raises
    ------
    ValueError
        If `axis` is out of range.
    """
    if not -rank <= axis < rank:
        raise ValueError(f"axis {axis} is out of bounds for rank {rank}")
    return axis % rank


def broadcast(a: StaticShape, b: StaticShape) -> StaticShape:
    """
    Static broadcast of two shapes following NumPy rules.
    """
    if a is None or b is None:
        return None
    rank = max(len(a), len(b))
    a = (1,) * (rank - len(a)) + tuple(a)
    b = (1,) * (rank - len(b)) + tuple(b)
    out: list[Optional[int]] = []
    for x, y in zip(a, b):
        if x == 1:
            out.append(y)
        elif y == 1:
            out.append(x)
        elif x is None or y is None:
            out.append(x if y is None else y)
        elif x == y:
            out.append(x)
        else:
            raise ValueError(f"Shapes {a} and {b} are not broadcastable")
    return tuple(out)


def reduce(shape: StaticShape, axis: Axis, keepdims: bool) -> StaticShape:
    """
    Static shape of a reduction over `axis`.
    """
    if shape is None:
        return None
    rank = len(shape)
    if axis is None:
        axes = set(range(rank))
    elif isinstance(axis, int):
        axes = {normalize_axis(axis, rank)}
    else:
        axes = {normalize_axis(a, rank) for a in axis}
    if keepdims:
        return tuple(1 if i in axes else d for i, d in enumerate(shape))
    return tuple(d for i, d in enumerate(shape) if i not in axes)
