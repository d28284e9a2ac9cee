import unittest

import numpy as np

from src.npkeras.domain._errors import GraphMismatchError, PlaceholderNotFedError
from src.npkeras.infrastructure.graph._context import context
from src.npkeras.infrastructure.graph._graph import FuncGraph, Graph
from src.npkeras.infrastructure.graph._session import (
    ConcreteFunction,
    Session,
    evaluate,
    lift_to_graph,
)
from src.npkeras.infrastructure.ops import array_ops, math_ops


class TestSession(unittest.TestCase):
    def setUp(self):
        context.reset_context()
        context.enable_eager_execution()

    def tearDown(self):
        context.reset_context()
        context.enable_eager_execution()

    def test_run_with_feed(self):
        g = Graph("g")
        with g.as_default():
            x = array_ops.placeholder(np.float32, shape=(None, 2), name="x")
            y = math_ops.multiply(x, 2.0)
        sess = Session(g)
        out = sess.run(y, feed_dict={x: [[1.0, 2.0]]})
        np.testing.assert_allclose(out, [[2.0, 4.0]])
        self.assertEqual(out.dtype, np.float32)

    def test_run_list_returns_list(self):
        g = Graph("g")
        with g.as_default():
            a = array_ops.constant([1.0, 2.0])
            b = math_ops.add(a, 1.0)
        outs = Session(g).run([a, b])
        self.assertIsInstance(outs, list)
        np.testing.assert_allclose(outs[1], [2.0, 3.0])

    def test_unfed_placeholder_raises(self):
        g = Graph("g")
        with g.as_default():
            x = array_ops.placeholder(np.float32, shape=(2,), name="x")
            y = math_ops.negative(x)
        with self.assertRaises(PlaceholderNotFedError):
            Session(g).run(y)

    def test_placeholder_with_default(self):
        g = Graph("g")
        with g.as_default():
            flag = array_ops.placeholder_with_default(False, shape=())
        sess = Session(g)
        self.assertFalse(bool(sess.run(flag)))
        self.assertTrue(bool(sess.run(flag, feed_dict={flag: True})))

    def test_foreign_graph_raises(self):
        a, b = Graph("a"), Graph("b")
        with a.as_default():
            t = array_ops.constant(1.0)
        with self.assertRaises(GraphMismatchError):
            Session(b).run(t)

    def test_closed_session_raises(self):
        g = Graph("g")
        with Session(g) as sess:
            pass
        with self.assertRaises(RuntimeError):
            sess.run(array_ops.constant(1.0))

    def test_as_default_restores_previous(self):
        outer = Session(Graph("a"))
        context.set_default_session(outer)
        inner = Session(Graph("b"))
        with inner.as_default():
            self.assertIs(context.get_default_session(), inner)
        self.assertIs(context.get_default_session(), outer)

    def test_evaluate_memoizes_shared_inputs(self):
        calls = []
        g = Graph("g")
        with g.as_default():
            a = array_ops.constant(np.array([1.0, 2.0]))
            original = a.op.compute

            def counting():
                calls.append(1)
                return original()

            a.op.compute = counting
            b = math_ops.add(a, a)
        np.testing.assert_allclose(evaluate([b])[0], [2.0, 4.0])
        self.assertEqual(len(calls), 1)


class TestConcreteFunction(unittest.TestCase):
    def setUp(self):
        context.reset_context()
        context.enable_eager_execution()

    def tearDown(self):
        context.reset_context()
        context.enable_eager_execution()

    def test_capture_and_call(self):
        outer = FuncGraph("outer")
        with outer.as_default():
            x = array_ops.placeholder(np.float32, shape=(3,), name="x")
            y = math_ops.add(x, 1.0)

        scratch = FuncGraph("scratch")
        lifted = lift_to_graph(
            [y], scratch, sources=[], add_sources=True, handle_captures=True,
            base_graph=outer,
        )
        self.assertIs(lifted[y], y)
        self.assertTrue(scratch.captured(x))
        self.assertEqual(scratch.external_captures, [x])

        scratch.inputs = scratch.internal_captures
        scratch.outputs = [y]
        fn = ConcreteFunction(scratch)
        (out,) = fn(np.array([1.0, 2.0, 3.0], dtype=np.float32))
        np.testing.assert_allclose(out, [2.0, 3.0, 4.0])

    def test_call_without_args_on_placeholder_raises(self):
        outer = FuncGraph("outer")
        with outer.as_default():
            x = array_ops.placeholder(np.float32, shape=(1,), name="x")
        scratch = FuncGraph("scratch")
        lift_to_graph([x], scratch, handle_captures=True, base_graph=outer)
        scratch.inputs = scratch.internal_captures
        scratch.outputs = [x]
        with self.assertRaises(PlaceholderNotFedError):
            ConcreteFunction(scratch)()

    def test_wrong_arity_raises(self):
        fg = FuncGraph("fn")
        with fg.as_default():
            x = array_ops.placeholder(np.float32, shape=(1,))
        fg.inputs = [x]
        fg.outputs = [x]
        with self.assertRaises(ValueError):
            ConcreteFunction(fg)(1.0, 2.0)

    def test_capture_is_idempotent(self):
        outer = Graph("outer")
        with outer.as_default():
            x = array_ops.placeholder(np.float32, shape=(1,))
        fg = FuncGraph("fn")
        self.assertIs(fg.capture(x), fg.capture(x))
        self.assertEqual(len(fg.internal_captures), 1)


if __name__ == "__main__":
    unittest.main()
