import unittest

import numpy as np

from src.npkeras.domain._data_format import PaddingMode
from src.npkeras.infrastructure.graph._context import context
from src.npkeras.infrastructure.graph._graph import Graph
from src.npkeras.infrastructure.graph._session import Session
from src.npkeras.infrastructure.ops import array_ops, nn_ops
from src.npkeras.infrastructure.ops.conv2d_transpose_cpu import (
    conv2d_transpose_forward_cpu,
    forward_conv_output_size,
    leading_pad,
)


def _tol(dtype: np.dtype) -> tuple[float, float]:
    dtype = np.dtype(dtype)
    if dtype == np.float32:
        return 1e-5, 1e-6
    return 1e-12, 1e-12


def _ref_conv2d_transpose_numpy(
    x: np.ndarray,
    w: np.ndarray,
    output_shape: tuple[int, int, int, int],
    stride: tuple[int, int],
    padding: PaddingMode,
) -> np.ndarray:
    """
    Naive NHWC / HWOI transpose-conv reference.

    y[n, hi*s_h + kh - p_h, wi*s_w + kw - p_w, co] += x[n, hi, wi, ci] * w[kh, kw, co, ci]
    """
    s_h, s_w = stride
    N, H_in, W_in, C_in = x.shape
    K_h, K_w, C_out, _ = w.shape
    _, H_out, W_out, _ = output_shape
    p_h = leading_pad(H_in, H_out, K_h, s_h, padding)
    p_w = leading_pad(W_in, W_out, K_w, s_w, padding)

    y = np.zeros(output_shape, dtype=np.result_type(x.dtype, w.dtype))
    for n in range(N):
        for hi in range(H_in):
            for wi in range(W_in):
                for ci in range(C_in):
                    xv = x[n, hi, wi, ci]
                    for kh in range(K_h):
                        oh = hi * s_h + kh - p_h
                        if oh < 0 or oh >= H_out:
                            continue
                        for kw in range(K_w):
                            ow = wi * s_w + kw - p_w
                            if ow < 0 or ow >= W_out:
                                continue
                            for co in range(C_out):
                                y[n, oh, ow, co] += xv * w[kh, kw, co, ci]
    return y


def _ref_conv2d_numpy(
    y: np.ndarray,
    w: np.ndarray,
    in_hw: tuple[int, int],
    stride: tuple[int, int],
    padding: PaddingMode,
) -> np.ndarray:
    """
    Naive forward convolution mapping the transposed output back to the input.
    """
    s_h, s_w = stride
    N, H_out, W_out, C_out = y.shape
    K_h, K_w, _, C_in = w.shape
    H_in, W_in = in_hw
    p_h = leading_pad(H_in, H_out, K_h, s_h, padding)
    p_w = leading_pad(W_in, W_out, K_w, s_w, padding)

    x = np.zeros((N, H_in, W_in, C_in), dtype=y.dtype)
    for n in range(N):
        for i in range(H_in):
            for j in range(W_in):
                for kh in range(K_h):
                    oh = i * s_h + kh - p_h
                    if oh < 0 or oh >= H_out:
                        continue
                    for kw in range(K_w):
                        ow = j * s_w + kw - p_w
                        if ow < 0 or ow >= W_out:
                            continue
                        x[n, i, j, :] += y[n, oh, ow, :] @ w[kh, kw]
    return x


class TestConv2dTransposeCpu(unittest.TestCase):
    def test_matches_reference(self):
        rng = np.random.RandomState(0)
        cases = [
            # (N, H_in, W_in, C_in, C_out, K_h, K_w, stride, padding, H_out, W_out)
            (1, 3, 3, 2, 4, 3, 3, (1, 1), PaddingMode.SAME, 3, 3),
            (2, 3, 4, 2, 3, 3, 3, (2, 2), PaddingMode.SAME, 6, 8),
            (2, 3, 4, 2, 3, 3, 3, (2, 2), PaddingMode.SAME, 5, 7),
            (1, 2, 2, 1, 2, 2, 3, (1, 2), PaddingMode.VALID, 3, 5),
            (2, 3, 3, 3, 1, 3, 2, (2, 1), PaddingMode.VALID, 7, 4),
        ]
        for dtype in (np.float32, np.float64):
            for case in cases:
                N, H, W, C_in, C_out, K_h, K_w, stride, padding, H_out, W_out = case
                with self.subTest(dtype=np.dtype(dtype).name, case=case):
                    x = rng.randn(N, H, W, C_in).astype(dtype)
                    w = rng.randn(K_h, K_w, C_out, C_in).astype(dtype)
                    out_shape = (N, H_out, W_out, C_out)

                    y = conv2d_transpose_forward_cpu(x, w, out_shape, stride, padding)
                    y_ref = _ref_conv2d_transpose_numpy(x, w, out_shape, stride, padding)

                    self.assertEqual(y.shape, out_shape)
                    self.assertEqual(y.dtype, np.dtype(dtype))
                    rtol, atol = _tol(dtype)
                    np.testing.assert_allclose(y, y_ref, rtol=rtol, atol=atol)

    def test_is_adjoint_of_conv2d(self):
        rng = np.random.RandomState(1)
        x = rng.randn(2, 3, 3, 2)
        w = rng.randn(3, 3, 4, 2)
        out_shape = (2, 6, 6, 4)
        y_probe = rng.randn(*out_shape)

        y = conv2d_transpose_forward_cpu(x, w, out_shape, (2, 2), PaddingMode.SAME)
        x_back = _ref_conv2d_numpy(y_probe, w, (3, 3), (2, 2), PaddingMode.SAME)

        self.assertAlmostEqual(float(np.sum(y * y_probe)), float(np.sum(x * x_back)), places=8)

    def test_single_pixel_valid_returns_kernel(self):
        x = np.ones((1, 1, 1, 1))
        w = np.arange(6, dtype=np.float64).reshape(2, 3, 1, 1)
        y = conv2d_transpose_forward_cpu(x, w, (1, 2, 3, 1), 1, PaddingMode.VALID)
        np.testing.assert_array_equal(y[0, :, :, 0], w[:, :, 0, 0])

    def test_forward_conv_output_size(self):
        self.assertEqual(forward_conv_output_size(6, 3, 2, PaddingMode.SAME), 3)
        self.assertEqual(forward_conv_output_size(5, 3, 2, PaddingMode.SAME), 3)
        self.assertEqual(forward_conv_output_size(7, 3, 2, PaddingMode.VALID), 3)

    def test_shape_validation(self):
        x = np.zeros((1, 3, 3, 2))
        w = np.zeros((3, 3, 4, 2))
        with self.assertRaises(ValueError):
            conv2d_transpose_forward_cpu(x, np.zeros((3, 3, 4, 5)), (1, 3, 3, 4), 1, PaddingMode.SAME)
        with self.assertRaises(ValueError):
            conv2d_transpose_forward_cpu(x, w, (2, 3, 3, 4), 1, PaddingMode.SAME)
        with self.assertRaises(ValueError):
            conv2d_transpose_forward_cpu(x, w, (1, 3, 3, 3), 1, PaddingMode.SAME)
        with self.assertRaises(ValueError):
            conv2d_transpose_forward_cpu(x, w, (1, 9, 3, 4), 1, PaddingMode.SAME)
        with self.assertRaises(ValueError):
            conv2d_transpose_forward_cpu(x, w, (1, 3, 3, 4), 0, PaddingMode.SAME)


class TestConv2dTransposeOp(unittest.TestCase):
    def setUp(self):
        context.reset_context()
        context.enable_eager_execution()

    def tearDown(self):
        context.reset_context()
        context.enable_eager_execution()

    def test_eager_op(self):
        x = np.ones((1, 2, 2, 1), dtype=np.float32)
        w = np.ones((2, 2, 3, 1), dtype=np.float32)
        y = nn_ops.conv2d_transpose(x, w, [1, 4, 4, 3], (1, 2, 2, 1), padding="VALID")
        self.assertEqual(y.op.type, "Conv2DBackpropInput")
        np.testing.assert_array_equal(y.numpy(), np.ones((1, 4, 4, 3), dtype=np.float32))

    def test_strides_and_format_validation(self):
        x = np.ones((1, 2, 2, 1))
        w = np.ones((2, 2, 1, 1))
        with self.assertRaises(ValueError):
            nn_ops.conv2d_transpose(x, w, [1, 4, 4, 1], (2, 2, 2, 1))
        with self.assertRaises(ValueError):
            nn_ops.conv2d_transpose(x, w, [1, 4, 4, 1], (1, 2, 2, 1), data_format="NCHW")
        with self.assertRaises(ValueError):
            nn_ops.conv2d_transpose(x, w, [1, 4, 4, 1], (1, 2, 2, 1), padding="full")

    def test_symbolic_static_shape_from_constant(self):
        g = Graph()
        with g.as_default():
            x = array_ops.placeholder(np.float32, shape=(2, 3, 3, 1))
            w = array_ops.constant(np.ones((3, 3, 2, 1), dtype=np.float32))
            y = nn_ops.conv2d_transpose(x, w, [2, 6, 6, 2], (1, 2, 2, 1), padding="SAME")
        self.assertEqual(y.shape, (2, 6, 6, 2))
        out = Session(g).run(y, feed_dict={x: np.ones((2, 3, 3, 1))})
        self.assertEqual(out.shape, (2, 6, 6, 2))


if __name__ == "__main__":
    unittest.main()
