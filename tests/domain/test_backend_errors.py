import unittest

from src.npkeras.domain._errors import (
    GraphMismatchError,
    PlaceholderNotFedError,
    SymbolicTensorError,
    UninitializedVariableError,
    UnsupportedOperationError,
)


class TestUnsupportedOperationError(unittest.TestCase):
    def test_message_and_attributes(self):
        err = UnsupportedOperationError("placeholder", "sparse is true")
        self.assertEqual(str(err), "placeholder is not implemented: sparse is true")
        self.assertEqual(err.op, "placeholder")
        self.assertEqual(err.detail, "sparse is true")

    def test_is_not_implemented_error(self):
        with self.assertRaises(NotImplementedError):
            raise UnsupportedOperationError("conv2d_transpose", "dilation")


class TestRuntimeErrors(unittest.TestCase):
    def test_graph_mismatch(self):
        err = GraphMismatchError("x:0", "g")
        self.assertIsInstance(err, RuntimeError)
        self.assertIn("'x:0'", str(err))
        self.assertIn("'g'", str(err))

    def test_placeholder_not_fed(self):
        err = PlaceholderNotFedError("input:0")
        self.assertIsInstance(err, RuntimeError)
        self.assertEqual(err.name, "input:0")
        self.assertIn("feed a value", str(err))

    def test_symbolic_tensor(self):
        err = SymbolicTensorError("y:0")
        self.assertIsInstance(err, RuntimeError)
        self.assertIn("symbolic", str(err))

    def test_uninitialized_variable(self):
        err = UninitializedVariableError("kernel")
        self.assertIsInstance(err, RuntimeError)
        self.assertIn("uninitialized value 'kernel'", str(err))


if __name__ == "__main__":
    unittest.main()
