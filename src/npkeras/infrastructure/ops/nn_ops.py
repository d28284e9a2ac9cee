"""
Neural-network primitives forwarded to NumPy.

Activations (`softmax`, `sigmoid`) record distinct operation types so that
loss functions can recognize probability tensors produced by them and
recover the logits, exactly like graph engines do.

Cross-entropy kernels are written in their numerically stable forms:

- softmax CE : -sum(labels * log_softmax(logits))
- sparse CE  : -log_softmax(logits)[label]
- sigmoid CE : max(x, 0) - x * z + log(1 + exp(-|x|))
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from ...domain._data_format import PaddingMode
from ..tensor import _shape
from ..tensor._tensor import Tensor
from . import array_ops
from ._op_helpers import apply_op
from .array_ops import convert_to_tensor
from .conv2d_transpose_cpu import conv2d_transpose_forward_cpu
from .math_ops import cast


def _log_softmax(z: np.ndarray, axis: int) -> np.ndarray:
    shifted = z - np.max(z, axis=axis, keepdims=True)
    return shifted - np.log(np.sum(np.exp(shifted), axis=axis, keepdims=True))


def _softmax(z: np.ndarray, axis: int) -> np.ndarray:
    e = np.exp(z - np.max(z, axis=axis, keepdims=True))
    return e / np.sum(e, axis=axis, keepdims=True)


def _sigmoid(x: np.ndarray) -> np.ndarray:
    # exp of a non-positive argument only
    e = np.exp(-np.abs(x))
    return np.where(x >= 0, 1.0 / (1.0 + e), e / (1.0 + e))


def softmax(logits: Any, axis: int = -1, name: str = "Softmax") -> Tensor:
    logits = convert_to_tensor(logits)
    return apply_op(
        "Softmax",
        [logits],
        lambda z: _softmax(z, axis),
        dtype=logits.dtype,
        shape=logits.shape,
        name=name,
        attrs={"axis": axis},
    )


def sigmoid(x: Any, name: str = "Sigmoid") -> Tensor:
    x = convert_to_tensor(x)
    return apply_op(
        "Sigmoid", [x], _sigmoid, dtype=x.dtype, shape=x.shape, name=name
    )


def softmax_cross_entropy_with_logits(
    labels: Any, logits: Any, axis: int = -1, name: str = "SoftmaxCrossEntropyWithLogits"
) -> Tensor:
    """
    Softmax cross-entropy between dense `labels` and `logits` along `axis`.
    """
    logits = convert_to_tensor(logits)
    labels = convert_to_tensor(labels)
    if labels.dtype != logits.dtype:
        labels = cast(labels, logits.dtype)
    static = _shape.reduce(_shape.broadcast(labels.shape, logits.shape), axis, False)
    return apply_op(
        "SoftmaxCrossEntropyWithLogits",
        [labels, logits],
        lambda y, z: -np.sum(y * _log_softmax(z, axis), axis=axis),
        dtype=logits.dtype,
        shape=static,
        name=name,
    )


def sparse_softmax_cross_entropy_with_logits(
    labels: Any, logits: Any, name: str = "SparseSoftmaxCrossEntropyWithLogits"
) -> Tensor:
    """
    Softmax cross-entropy between integer class `labels` and `logits`.

    `labels` has shape `logits.shape[:-1]` and holds indices into the last
    axis of `logits`.

    Raises
    ------
    ValueError
        If the ranks are inconsistent, or (at evaluation time) a label is
        outside [0, num_classes).
    """
    logits = convert_to_tensor(logits)
    labels = convert_to_tensor(labels)
    if labels.ndim is not None and logits.ndim is not None:
        if labels.ndim != logits.ndim - 1:
            raise ValueError(
                f"Rank mismatch: Rank of labels (received {labels.ndim}) should "
                f"equal rank of logits minus 1 (received {logits.ndim})."
            )

    def _compute(y: np.ndarray, z: np.ndarray) -> np.ndarray:
        n_classes = z.shape[-1]
        idx = y.astype(np.int64)
        if idx.size and (idx.min() < 0 or idx.max() >= n_classes):
            raise ValueError(
                f"Received a label value outside the valid range of [0, {n_classes})."
            )
        picked = np.take_along_axis(_log_softmax(z, -1), idx[..., None], axis=-1)
        return -picked[..., 0]

    static = labels.shape
    if static is None and logits.shape is not None:
        static = tuple(logits.shape[:-1])
    return apply_op(
        "SparseSoftmaxCrossEntropyWithLogits",
        [labels, logits],
        _compute,
        dtype=logits.dtype,
        shape=static,
        name=name,
    )


def sigmoid_cross_entropy_with_logits(
    labels: Any, logits: Any, name: str = "logistic_loss"
) -> Tensor:
    """
    Elementwise sigmoid cross-entropy.

    Raises
    ------
    ValueError
        If the static shapes of `labels` and `logits` differ.
    """
    logits = convert_to_tensor(logits)
    labels = cast(convert_to_tensor(labels), logits.dtype)
    if not _shape.is_compatible(labels.shape, logits.shape):
        raise ValueError(
            f"`logits` and `labels` must have the same shape, received "
            f"({logits.shape} vs {labels.shape})."
        )
    return apply_op(
        "SigmoidCrossEntropyWithLogits",
        [labels, logits],
        lambda z, x: np.maximum(x, 0) - x * z + np.log1p(np.exp(-np.abs(x))),
        dtype=logits.dtype,
        shape=_shape.merge(labels.shape, logits.shape),
        name=name,
    )


def conv2d_transpose(
    value: Any,
    filters: Any,
    output_shape: Any,
    strides: Sequence[int],
    padding: str = "SAME",
    data_format: str = "NHWC",
    name: str = "conv2d_transpose",
) -> Tensor:
    """
    NHWC transposed convolution.

    Parameters
    ----------
    value : tensor-like
        Input of shape (N, H, W, C_in).
    filters : tensor-like or Variable
        Kernel of shape (K_h, K_w, C_out, C_in).
    output_shape : sequence or 1D integer tensor
        Output shape (N, H_out, W_out, C_out).
    strides : Sequence[int]
        Four NHWC strides; batch and channel strides must be 1.
    padding : str
        "SAME" or "VALID".
    data_format : str
        Only "NHWC" is accepted by the NumPy kernel.

    Raises
    ------
    ValueError
        For an unsupported data format, non-unit batch/channel strides or an
        invalid padding mode.
    """
    if data_format != "NHWC":
        raise ValueError(f"conv2d_transpose only supports NHWC, got {data_format}")
    strides = tuple(int(s) for s in strides)
    if len(strides) != 4 or strides[0] != 1 or strides[3] != 1:
        raise ValueError(
            f"strides must be (1, s_h, s_w, 1) in NHWC layout, got {strides}"
        )
    mode = PaddingMode.parse(padding)

    x = convert_to_tensor(value)
    w = convert_to_tensor(filters)
    shape_t = convert_to_tensor(output_shape)

    static = None
    if shape_t.op.type == "Const":
        static = tuple(int(d) for d in array_ops.constant_value(shape_t))
    elif shape_t.shape is not None and shape_t.shape[0] == 4:
        static = (None, None, None, None)

    return apply_op(
        "Conv2DBackpropInput",
        [x, w, shape_t],
        lambda xv, wv, sv: conv2d_transpose_forward_cpu(
            xv, wv, sv, (strides[1], strides[2]), mode
        ),
        dtype=np.result_type(x.dtype, w.dtype),
        shape=static,
        name=name,
        attrs={"strides": strides, "padding": str(mode)},
    )

