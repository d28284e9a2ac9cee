from ._backend_base import BackendBase
from ._backend_impl import BackendImpl

backend = BackendImpl()

__all__ = [
    BackendBase.__name__,
    BackendImpl.__name__,
    "backend",
]
