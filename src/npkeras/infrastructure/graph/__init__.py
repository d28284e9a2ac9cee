from ._operation import Operation
from ._graph import FuncGraph, Graph
from ._context import ExecutionContext, context, executing_eagerly, get_default_graph
from ._session import ConcreteFunction, Session, evaluate, lift_to_graph

__all__ = [
    Operation.__name__,
    FuncGraph.__name__,
    Graph.__name__,
    ExecutionContext.__name__,
    "context",
    executing_eagerly.__name__,
    get_default_graph.__name__,
    ConcreteFunction.__name__,
    Session.__name__,
    evaluate.__name__,
    lift_to_graph.__name__,
]
