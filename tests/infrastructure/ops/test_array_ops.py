import unittest

import numpy as np

from src.npkeras.infrastructure.graph._context import context
from src.npkeras.infrastructure.graph._graph import Graph
from src.npkeras.infrastructure.graph._session import Session
from src.npkeras.infrastructure.ops import array_ops


class TestArrayOpsEager(unittest.TestCase):
    def setUp(self):
        context.reset_context()
        context.enable_eager_execution()

    def tearDown(self):
        context.reset_context()
        context.enable_eager_execution()

    def test_constant_broadcasts_scalar_to_shape(self):
        t = array_ops.constant(3.0, dtype=np.float32, shape=(2, 2))
        np.testing.assert_array_equal(t.numpy(), np.full((2, 2), 3.0, dtype=np.float32))

    def test_constant_reshapes(self):
        t = array_ops.constant([1, 2, 3, 4], shape=(2, 2))
        self.assertEqual(t.shape, (2, 2))
        np.testing.assert_array_equal(array_ops.constant_value(t), [[1, 2], [3, 4]])

    def test_convert_to_tensor_dtype_mismatch_raises(self):
        t = array_ops.constant(np.zeros(2, dtype=np.float32))
        self.assertIs(array_ops.convert_to_tensor(t), t)
        with self.assertRaises(ValueError):
            array_ops.convert_to_tensor(t, dtype=np.int32)

    def test_placeholder_in_eager_raises(self):
        with self.assertRaises(RuntimeError):
            array_ops.placeholder(np.float32, shape=(1,))

    def test_shape(self):
        t = array_ops.constant(np.zeros((2, 5, 3)))
        s = array_ops.shape(t)
        self.assertEqual(s.dtype, np.int32)
        np.testing.assert_array_equal(s.numpy(), [2, 5, 3])

    def test_pad(self):
        t = array_ops.constant(np.ones((1, 2), dtype=np.float32))
        out = array_ops.pad(t, [[0, 0], [1, 2]])
        np.testing.assert_array_equal(out.numpy(), [[0, 1, 1, 0, 0]])

    def test_pad_validation(self):
        t = array_ops.constant(np.ones((1, 2)))
        with self.assertRaises(ValueError):
            array_ops.pad(t, [[0, 0]])
        with self.assertRaises(ValueError):
            array_ops.pad(t, [[0, 0], [-1, 0]])
        with self.assertRaises(ValueError):
            array_ops.pad(t, [[0, 0], [1, 2, 3]])

    def test_concat_and_stack(self):
        a = array_ops.constant(np.zeros((2, 1)))
        b = array_ops.constant(np.ones((2, 2)))
        out = array_ops.concat([a, b], axis=1)
        self.assertEqual(out.shape, (2, 3))
        self.assertEqual(out.op.type, "ConcatV2")
        s = array_ops.stack([1, 2, 3])
        np.testing.assert_array_equal(s.numpy(), [1, 2, 3])

    def test_transpose_invalid_perm(self):
        t = array_ops.constant(np.zeros((2, 3)))
        with self.assertRaises(ValueError):
            array_ops.transpose(t, [0, 0])
        with self.assertRaises(ValueError):
            array_ops.transpose(t, [2, 1, 0])

    def test_reshape_infers_minus_one(self):
        t = array_ops.constant(np.arange(12))
        out = array_ops.reshape(t, [-1, 4])
        self.assertEqual(out.shape, (3, 4))
        with self.assertRaises(ValueError):
            array_ops.reshape(t, [-1, -1])

    def test_where(self):
        out = array_ops.where(
            np.array([True, False, True]), np.array([1.0, 2.0, 3.0]), 0.0
        )
        np.testing.assert_array_equal(out.numpy(), [1.0, 0.0, 3.0])


class TestArrayOpsSymbolic(unittest.TestCase):
    def setUp(self):
        context.reset_context()
        context.enable_eager_execution()
        self.graph = Graph("g")

    def tearDown(self):
        context.reset_context()
        context.enable_eager_execution()

    def test_static_shapes(self):
        with self.graph.as_default():
            x = array_ops.placeholder(np.float32, shape=(None, 4, 4, 3))
            padded = array_ops.pad(x, [[0, 0], [1, 1], [2, 2], [0, 0]])
            perm = array_ops.transpose(x, (0, 3, 1, 2))
            joined = array_ops.concat([x, x], axis=-1)
            flat = array_ops.reshape(x, [-1])
        self.assertEqual(padded.shape, (None, 6, 8, 3))
        self.assertEqual(perm.shape, (None, 3, 4, 4))
        self.assertEqual(joined.shape, (None, 4, 4, 6))
        self.assertEqual(flat.shape, (None,))

    def test_dynamic_shape_and_reshape(self):
        with self.graph.as_default():
            x = array_ops.placeholder(np.float32, shape=(None, 2, 3))
            s = array_ops.shape(x)
            lead = s[0]
            y = array_ops.reshape(x, array_ops.stack([lead, 6]))
        self.assertEqual(s.shape, (3,))
        self.assertEqual(y.shape, (None, None))
        out = Session(self.graph).run(y, feed_dict={x: np.ones((4, 2, 3))})
        self.assertEqual(out.shape, (4, 6))

    def test_ops_are_named_uniquely(self):
        with self.graph.as_default():
            a = array_ops.identity(array_ops.constant(1.0))
            b = array_ops.identity(array_ops.constant(2.0))
        self.assertEqual(a.op.name, "Identity")
        self.assertEqual(b.op.name, "Identity_1")
        self.assertEqual(
            [op.type for op in self.graph.get_operations()],
            ["Const", "Identity", "Const", "Identity"],
        )


if __name__ == "__main__":
    unittest.main()
