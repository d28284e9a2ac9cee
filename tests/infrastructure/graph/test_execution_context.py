import unittest

from src.npkeras.infrastructure.graph._context import context
from src.npkeras.infrastructure.graph._graph import FuncGraph, Graph


class TestExecutionContext(unittest.TestCase):
    def setUp(self):
        context.reset_context()
        context.enable_eager_execution()

    def tearDown(self):
        context.reset_context()
        context.enable_eager_execution()

    def test_eager_by_default(self):
        self.assertTrue(context.executing_eagerly())
        self.assertTrue(context.executing_eagerly_outside_functions())

    def test_graph_scope_disables_eager(self):
        g = Graph("g")
        with g.as_default():
            self.assertFalse(context.executing_eagerly())
            self.assertIs(context.get_default_graph(), g)
            self.assertFalse(context.executing_eagerly_outside_functions())
        self.assertTrue(context.executing_eagerly())
        self.assertIsNot(context.get_default_graph(), g)

    def test_func_graph_keeps_outside_functions_eager(self):
        fg = FuncGraph("fn")
        with fg.as_default():
            self.assertFalse(context.executing_eagerly())
            self.assertTrue(context.executing_eagerly_outside_functions())

    def test_disable_eager_execution(self):
        context.disable_eager_execution()
        self.assertFalse(context.executing_eagerly())
        self.assertFalse(context.executing_eagerly_outside_functions())

    def test_switch_and_restore_mode(self):
        context.switch_to(False)
        self.assertFalse(context.executing_eagerly())
        context.restore_mode()
        self.assertTrue(context.executing_eagerly())
        # restoring with nothing saved is a no-op
        context.restore_mode()
        self.assertTrue(context.executing_eagerly())

    def test_mode_context_managers(self):
        with context.graph_mode():
            self.assertFalse(context.executing_eagerly())
            with context.eager_mode():
                self.assertTrue(context.executing_eagerly())
            self.assertFalse(context.executing_eagerly())
        self.assertTrue(context.executing_eagerly())

    def test_pop_wrong_graph_raises(self):
        a, b = Graph("a"), Graph("b")
        context.push_graph(a)
        with self.assertRaises(RuntimeError):
            context.pop_graph(b)
        context.pop_graph(a)

    def test_reset_context_creates_fresh_default_graph(self):
        before = context.get_default_graph()
        context.reset_context()
        self.assertIsNot(context.get_default_graph(), before)
        self.assertIsNone(context.get_default_session())


class TestGraph(unittest.TestCase):
    def test_unique_name(self):
        g = Graph()
        self.assertEqual(g.unique_name("dense"), "dense")
        self.assertEqual(g.unique_name("dense"), "dense_1")
        self.assertEqual(g.unique_name("dense"), "dense_2")
        self.assertEqual(g.unique_name("conv"), "conv")

    def test_graph_key_is_distinct(self):
        a, b = Graph(), Graph()
        self.assertTrue(a.graph_key.startswith("grap-key-"))
        self.assertTrue(a.graph_key.endswith("/"))
        self.assertNotEqual(a.graph_key, b.graph_key)

    def test_get_operation_by_name_missing(self):
        with self.assertRaises(KeyError):
            Graph().get_operation_by_name("missing")


if __name__ == "__main__":
    unittest.main()
