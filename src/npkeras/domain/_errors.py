"""
Backend-level exceptions for npkeras.

This module defines the runtime errors raised by the backend adapter when an
operation cannot be forwarded to the NumPy engine. They let the adapter fail
fast and clearly when a caller requests a parameter combination that has no
NumPy counterpart (e.g., sparse placeholders or dilated transposed
convolution), or when a symbolic graph cannot be evaluated.

Invalid enumerated arguments (unknown data formats, padding modes, etc.) are
reported with the built-in `ValueError` and are not modeled here.
"""


class UnsupportedOperationError(NotImplementedError):
    """
    Raised when an operation is requested with a parameter combination the
    backend does not implement.

    Attributes
    ----------
    op : str
        The name of the backend operation (e.g., "placeholder").
    detail : str
        Human-readable description of the unsupported combination.
    """

    def __init__(self, op: str, detail: str) -> None:
        """
        Initialize the UnsupportedOperationError.

        Parameters
        ----------
        op : str
            The backend operation name.
        detail : str
            Description of the unsupported argument combination.
        """
        super().__init__(f"{op} is not implemented: {detail}")
        self.op = op
        self.detail = detail


class GraphMismatchError(RuntimeError):
    """
    Raised when a tensor is evaluated against a graph it does not belong to.

    This mirrors the session contract of graph engines: a session may only
    run fetches that were built in the graph it is bound to.
    """

    def __init__(self, tensor_name: str, graph_name: str) -> None:
        super().__init__(
            f"Tensor '{tensor_name}' is not an element of graph '{graph_name}'."
        )
        self.tensor_name = tensor_name
        self.graph_name = graph_name


class PlaceholderNotFedError(RuntimeError):
    """
    Raised when evaluation reaches a placeholder that has neither a fed value
    nor a default value.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"You must feed a value for placeholder tensor '{name}'.")
        self.name = name


class SymbolicTensorError(RuntimeError):
    """
    Raised when a concrete value is requested from a symbolic graph tensor.
    """

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Tensor '{name}' is symbolic; evaluate it with a Session or "
            "`eval_in_eager_or_function` instead of calling `numpy()`."
        )
        self.name = name


class UninitializedVariableError(RuntimeError):
    """
    Raised when a graph-mode variable is read before it was initialized.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"Attempting to use uninitialized value '{name}'.")
        self.name = name
