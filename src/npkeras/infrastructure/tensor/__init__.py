from ._tensor import Tensor
from ._variable import Variable

__all__ = [Tensor.__name__, Variable.__name__]
