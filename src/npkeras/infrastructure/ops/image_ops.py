"""
Image resizing forwarded to NumPy.

Both supported methods use half-pixel centers, matching the behavior of
modern graph-engine `image.resize`:

- nearest : src = min(floor((dst + 0.5) * in / out), in - 1)
- bilinear: src = (dst + 0.5) * in / out - 0.5, interpolated between
            max(floor(src), 0) and min(ceil(src), in - 1)

Images are NHWC. For integer upscaling factors nearest-neighbor resizing is
equivalent to `np.repeat` along the spatial axes.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ...domain._data_format import Interpolation
from ...domain._errors import UnsupportedOperationError
from ..tensor._tensor import Tensor
from . import array_ops
from ._op_helpers import apply_op
from .array_ops import convert_to_tensor


def _nearest_indices(in_size: int, out_size: int) -> np.ndarray:
    scale = in_size / out_size
    idx = np.floor((np.arange(out_size) + 0.5) * scale).astype(np.int64)
    return np.minimum(idx, in_size - 1)


def _bilinear_weights(in_size: int, out_size: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    scale = in_size / out_size
    src = (np.arange(out_size) + 0.5) * scale - 0.5
    lower = np.maximum(np.floor(src), 0).astype(np.int64)
    upper = np.minimum(np.ceil(src), in_size - 1).astype(np.int64)
    lerp = src - np.floor(src)
    return lower, upper, lerp


def resize_nearest(images: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """
    Nearest-neighbor resize of an NHWC batch to `size` = (height, width).
    """
    _, h, w, _ = images.shape
    rows = _nearest_indices(h, size[0])
    cols = _nearest_indices(w, size[1])
    return images[:, rows][:, :, cols]


def resize_bilinear(images: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """
    Bilinear resize of an NHWC batch to `size` = (height, width).

    Integer inputs are interpolated in float32, matching graph engines.
    """
    x = images if np.issubdtype(images.dtype, np.floating) else images.astype(np.float32)
    _, h, w, _ = x.shape
    top, bottom, y_lerp = _bilinear_weights(h, size[0])
    left, right, x_lerp = _bilinear_weights(w, size[1])

    y_lerp = y_lerp.astype(x.dtype)[None, :, None, None]
    x_lerp = x_lerp.astype(x.dtype)[None, None, :, None]

    top_rows = x[:, top]
    bottom_rows = x[:, bottom]
    top_val = top_rows[:, :, left] + (top_rows[:, :, right] - top_rows[:, :, left]) * x_lerp
    bottom_val = (
        bottom_rows[:, :, left]
        + (bottom_rows[:, :, right] - bottom_rows[:, :, left]) * x_lerp
    )
    return top_val + (bottom_val - top_val) * y_lerp


_RESIZERS = {
    Interpolation.NEAREST: resize_nearest,
    Interpolation.BILINEAR: resize_bilinear,
}


def resize_images_v2(
    images: Any,
    size: Any,
    method: Any = Interpolation.BILINEAR,
    name: str = "resize",
) -> Tensor:
    """
    Resize an NHWC batch of images to `size`.

    Parameters
    ----------
    images : tensor-like
        4D NHWC tensor.
    size : sequence of two ints or a 1D integer tensor
        New (height, width).
    method : Interpolation or str
        Interpolation method.

    Raises
    ------
    ValueError
        If `method` is unknown or `images` is not 4D.
    UnsupportedOperationError
        If `method` is known but not implemented by the NumPy engine.
    """
    method = Interpolation.parse(method)
    if not method.is_supported:
        raise UnsupportedOperationError(
            "resize_images", f"interpolation '{method.value}' is not supported"
        )
    resizer = _RESIZERS[method]

    images = convert_to_tensor(images)
    if images.ndim is not None and images.ndim != 4:
        raise ValueError(f"images must be 4D (NHWC), got rank {images.ndim}")
    size_t = convert_to_tensor(size)

    static = None
    if images.shape is not None:
        new_hw: tuple = (None, None)
        const = array_ops.constant_value(size_t)
        if const is not None:
            new_hw = tuple(int(d) for d in const)
        static = (images.shape[0],) + new_hw + (images.shape[3],)

    out_dtype = images.dtype
    if method is Interpolation.BILINEAR and not np.issubdtype(out_dtype, np.floating):
        out_dtype = np.dtype(np.float32)

    return apply_op(
        "ResizeBilinear" if method is Interpolation.BILINEAR else "ResizeNearestNeighbor",
        [images, size_t],
        lambda v, s: resizer(v, (int(s[0]), int(s[1]))),
        dtype=out_dtype,
        shape=static,
        name=name,
        attrs={"method": method.value},
    )
