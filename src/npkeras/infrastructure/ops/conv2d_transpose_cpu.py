"""
CPU (NumPy) ConvTranspose2D kernel for npkeras.

This module provides the NumPy implementation behind the backend's
`conv2d_transpose`. Transposed convolution is computed as the gradient of a
forward convolution with respect to its input: every input pixel scatters a
kernel-weighted patch into the (larger) output, after which the padding
implied by the requested output shape is cropped away.

Tensor layout
-------------
Activations follow NHWC:

- x: (N, H_in, W_in, C_in)
- y: (N, H_out, W_out, C_out)

Kernel layout is HWOI (graph-engine convention for transposed convolution):

- w: (K_h, K_w, C_out, C_in)

Non-goals
---------
- Dilation, groups
- Gradient computation (there is no autograd in this package)
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

from ...domain._data_format import PaddingMode


def _pair(v: int | Tuple[int, int]) -> Tuple[int, int]:
    """
    Normalize an integer or pair into a 2-tuple.
    """
    return (int(v[0]), int(v[1])) if isinstance(v, (tuple, list)) else (v, v)


def forward_conv_output_size(out_size: int, k: int, s: int, padding: PaddingMode) -> int:
    """
    Spatial size a forward convolution maps `out_size` to.

    The input of a transposed convolution must have exactly this size for the
    requested output size to be consistent.
    """
    if padding is PaddingMode.SAME:
        return math.ceil(out_size / s)
    return math.ceil((out_size - k + 1) / s)


def leading_pad(in_size: int, out_size: int, k: int, s: int, padding: PaddingMode) -> int:
    """
    Number of output rows/cols cropped before the first kept one.

    For SAME padding the total padding of the matching forward convolution is
    `max((in - 1) * s + k - out, 0)`, split with the smaller half in front.
    VALID padding crops nothing in front.
    """
    if padding is PaddingMode.VALID:
        return 0
    return max((in_size - 1) * s + k - out_size, 0) // 2


def conv2d_transpose_forward_cpu(
    x: np.ndarray,
    w: np.ndarray,
    output_shape: Sequence[int],
    stride: int | Tuple[int, int],
    padding: PaddingMode,
) -> np.ndarray:
    """
    Compute a 2D transpose convolution (CPU, NumPy, NHWC).

    Parameters
    ----------
    x : np.ndarray
        Input tensor of shape (N, H_in, W_in, C_in).
    w : np.ndarray
        Kernel of shape (K_h, K_w, C_out, C_in).
    output_shape : Sequence[int]
        Requested output shape (N, H_out, W_out, C_out).
    stride : int or tuple[int, int]
        Spatial strides.
    padding : PaddingMode
        Padding mode of the matching forward convolution.

    Returns
    -------
    np.ndarray
        Output tensor of shape `output_shape`.

    Raises
    ------
    ValueError
        If channel counts, batch size or spatial sizes are inconsistent.

    Notes
    -----
    Scatter-style accumulation over the uncropped output:
        y[n, hi*s_h + kh, wi*s_w + kw, co] += x[n, hi, wi, ci] * w[kh, kw, co, ci]
    followed by cropping `leading_pad` rows/cols in front.
    """
    s_h, s_w = _pair(stride)
    if s_h <= 0 or s_w <= 0:
        raise ValueError(f"stride must be positive, got stride=({s_h},{s_w})")

    N, H_in, W_in, C_in = x.shape
    K_h, K_w, C_out, C_in2 = w.shape
    if C_in != C_in2:
        raise ValueError(f"in_channels mismatch: x has {C_in}, kernel has {C_in2}")

    out = tuple(int(d) for d in output_shape)
    if len(out) != 4:
        raise ValueError(f"output_shape must have 4 entries, got {out}")
    N_out, H_out, W_out, C_out2 = out
    if N_out != N:
        raise ValueError(f"batch mismatch: x has {N}, output_shape has {N_out}")
    if C_out2 != C_out:
        raise ValueError(
            f"out_channels mismatch: kernel has {C_out}, output_shape has {C_out2}"
        )

    for name, size_in, size_out, k, s in (
        ("height", H_in, H_out, K_h, s_h),
        ("width", W_in, W_out, K_w, s_w),
    ):
        expected = forward_conv_output_size(size_out, k, s, padding)
        if expected != size_in:
            raise ValueError(
                f"Conv2DTranspose {name} mismatch: an output {name} of {size_out} "
                f"maps back to {expected} with kernel={k}, stride={s}, "
                f"padding={padding}, but the input {name} is {size_in}"
            )

    p_h = leading_pad(H_in, H_out, K_h, s_h, padding)
    p_w = leading_pad(W_in, W_out, K_w, s_w, padding)

    full_h = max((H_in - 1) * s_h + K_h, p_h + H_out)
    full_w = max((W_in - 1) * s_w + K_w, p_w + W_out)
    dtype = np.result_type(x.dtype, w.dtype)
    y = np.zeros((N, full_h, full_w, C_out), dtype=dtype)

    h_span = s_h * (H_in - 1) + 1
    w_span = s_w * (W_in - 1) + 1
    for kh in range(K_h):
        for kw in range(K_w):
            # (N, H_in, W_in, C_in) x (C_out, C_in) -> (N, H_in, W_in, C_out)
            contrib = np.einsum("nhwi,oi->nhwo", x, w[kh, kw])
            y[:, kh : kh + h_span : s_h, kw : kw + w_span : s_w, :] += contrib

    return y[:, p_h : p_h + H_out, p_w : p_w + W_out, :]
