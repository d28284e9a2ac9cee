from ._errors import (
    GraphMismatchError,
    PlaceholderNotFedError,
    SymbolicTensorError,
    UninitializedVariableError,
    UnsupportedOperationError,
)
from ._data_format import DataFormat, GraphLearningPhase, Interpolation, PaddingMode
from ._graph import IGraph, IOperation, ITensor, IVariable

__all__ = [
    GraphMismatchError.__name__,
    PlaceholderNotFedError.__name__,
    SymbolicTensorError.__name__,
    UninitializedVariableError.__name__,
    UnsupportedOperationError.__name__,
    DataFormat.__name__,
    GraphLearningPhase.__name__,
    Interpolation.__name__,
    PaddingMode.__name__,
    IGraph.__name__,
    IOperation.__name__,
    ITensor.__name__,
    IVariable.__name__,
]
