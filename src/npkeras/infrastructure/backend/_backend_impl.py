"""
Keras-style backend over the NumPy engine.

`BackendImpl` is the surface higher-level layers program against. Every
method forwards to a primitive in `ops` (which in turn calls NumPy); the
backend itself only:

- translates keyword arguments (data formats, padding modes, strides),
- special-cases shapes (negative axes, channels-first layouts, static shape
  hints after resizing),
- rejects unsupported parameter combinations with
  `UnsupportedOperationError`, and
- keeps per-graph bookkeeping: layer-name UID counters, learning phases,
  tracked variables, and the lazily created "keras_graph" / scratch graph
  used while executing eagerly.

Per-graph tables are weak-keyed on the graph object, so an entry lives
exactly as long as the graph it describes.
"""

from __future__ import annotations

import gc
import warnings
import weakref
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np

from ...domain._data_format import (
    DataFormat,
    GraphLearningPhase,
    Interpolation,
    PaddingMode,
)
from ...domain._errors import UnsupportedOperationError
from ...domain._graph import IGraph, ITensor, IVariable
from ..config._config import BackendConfig
from ..graph._context import context
from ..graph._graph import FuncGraph, Graph
from ..graph._session import ConcreteFunction, Session, lift_to_graph
from ..ops import array_ops, image_ops, math_ops, nn_ops
from ..ops.array_ops import convert_to_tensor
from ..tensor import _shape
from ..tensor._tensor import Tensor
from ..tensor._variable import Variable
from ._backend_base import BackendBase

TensorLike = Union[Tensor, Variable, np.ndarray, float, int]


class _DummyEagerGraph:
    """
    Key under which eager-mode learning-phase state is stored.
    """

    def __repr__(self) -> str:
        return "<_DummyEagerGraph>"


class BackendImpl(BackendBase):
    """
    NumPy-backed Keras backend.

    Parameters
    ----------
    config : Optional[BackendConfig]
        Backend settings; loaded from `keras.json` when None.
    """

    def __init__(self, config: Optional[BackendConfig] = None) -> None:
        super().__init__(config)
        self._GRAPH: Optional[FuncGraph] = None
        self._CURRENT_SCRATCH_GRAPH: Optional[FuncGraph] = None
        self._GRAPH_LEARNING_PHASES: "weakref.WeakKeyDictionary[Any, GraphLearningPhase]" = (
            weakref.WeakKeyDictionary()
        )
        self.PER_GRAPH_LAYER_NAME_UIDS: "weakref.WeakKeyDictionary[Graph, dict[str, int]]" = (
            weakref.WeakKeyDictionary()
        )
        self._GRAPH_VARIABLES: "weakref.WeakKeyDictionary[Graph, weakref.WeakSet[Variable]]" = (
            weakref.WeakKeyDictionary()
        )
        self._MANUAL_VAR_INIT = False
        self._DUMMY_EAGER_GRAPH = _DummyEagerGraph()

    # ==================================================================
    # Graph and session bookkeeping
    # ==================================================================
    def get_graph(self) -> Graph:
        """
        Return the graph Keras-level symbolic tensors are built in.

        While executing eagerly this is a lazily created
        `FuncGraph("keras_graph")`; otherwise it is the default graph.
        """
        if context.executing_eagerly():
            if self._GRAPH is None:
                self._GRAPH = FuncGraph("keras_graph")
            return self._GRAPH
        return context.get_default_graph()

    def _scratch_graph(self) -> FuncGraph:
        if self._CURRENT_SCRATCH_GRAPH is None:
            self._CURRENT_SCRATCH_GRAPH = FuncGraph("keras_scratch_graph")
        return self._CURRENT_SCRATCH_GRAPH

    def get_uid(self, prefix: str = "") -> int:
        """
        Return a 1-based, per-graph unique id for `prefix`.

        Each (default graph, prefix) pair has its own counter, which gives
        layers graph-specific autogenerated names ("dense", "dense_1", ...).
        """
        graph = context.get_default_graph()
        uids = self.PER_GRAPH_LAYER_NAME_UIDS.setdefault(graph, {})
        uids[prefix] = uids.get(prefix, 0) + 1
        return uids[prefix]

    def reset_uids(self) -> None:
        """Reset every per-graph layer-name counter."""
        self.PER_GRAPH_LAYER_NAME_UIDS = weakref.WeakKeyDictionary()

    def track_variable(self, v: IVariable) -> None:
        """Register `v` under the graph it belongs to."""
        self._GRAPH_VARIABLES.setdefault(v.graph, weakref.WeakSet()).add(v)

    def tracked_variables(self, graph: Optional[IGraph] = None) -> list[IVariable]:
        graph = graph if graph is not None else context.get_default_graph()
        return list(self._GRAPH_VARIABLES.get(graph, ()))

    def clear_session(self) -> None:
        """
        Destroy the current graph state and start from a clean slate.

        Resets the execution context (fresh default graph), every per-graph
        counter and learning phase, drops the keras and scratch graphs,
        installs a new default session and re-enables eager execution.
        """
        context.reset_context()
        self.reset_uids()
        self._GRAPH_LEARNING_PHASES.clear()
        self._CURRENT_SCRATCH_GRAPH = None
        self._GRAPH = None

        context.set_default_session(Session(context.get_default_graph()))
        context.enable_eager_execution()

        gc.collect()

    def manual_variable_initialization(self, value: bool) -> None:
        """
        Set whether `get_session` leaves variable initialization to the user.
        """
        self._MANUAL_VAR_INIT = bool(value)

    def get_session(self) -> Session:
        """
        Return the default session for the current default graph.

        A new session is created when none exists or the existing one is bound
        to another graph. Unless manual variable initialization is enabled,
        tracked variables of that graph that are not yet initialized are
        initialized through the session.
        """
        graph = context.get_default_graph()
        session = context.get_default_session()
        if session is None or session.graph is not graph:
            session = Session(graph)
            context.set_default_session(session)
        if not self._MANUAL_VAR_INIT:
            self._initialize_variables(session)
        return session

    def set_session(self, session: Session) -> None:
        context.set_default_session(session)

    def _initialize_variables(self, session: Session) -> None:
        pending = [
            v for v in self._GRAPH_VARIABLES.get(session.graph, ()) if not v.initialized
        ]
        if pending:
            session.run([v.initializer for v in pending])

    # ------------------------------------------------------------------
    # Learning phase
    # ------------------------------------------------------------------
    def _learning_phase_key(self) -> Any:
        if context.executing_eagerly():
            return self._DUMMY_EAGER_GRAPH
        return context.get_default_graph()

    def learning_phase(self) -> GraphLearningPhase:
        """
        Return the learning phase of the current context.

        While executing eagerly the phase stored under the dummy eager key is
        returned (TEST_MODE if never set). In graph mode, the first query on
        a graph records a `keras_learning_phase` placeholder (defaulting to
        False) in that graph and stores TEST_MODE for it.
        """
        key = self._learning_phase_key()
        if key is self._DUMMY_EAGER_GRAPH:
            return self._GRAPH_LEARNING_PHASES.get(key, GraphLearningPhase.TEST_MODE)

        if key not in self._GRAPH_LEARNING_PHASES:
            with key.as_default():
                array_ops.placeholder_with_default(
                    False, shape=(), name="keras_learning_phase"
                )
            self._GRAPH_LEARNING_PHASES[key] = GraphLearningPhase.TEST_MODE
        return self._GRAPH_LEARNING_PHASES[key]

    def set_learning_phase(self, value: Union[bool, int]) -> None:
        """
        Set the learning phase to 0/False (test) or 1/True (train).

        Raises
        ------
        ValueError
            If `value` is anything else.
        """
        phase = GraphLearningPhase.parse(value)
        self._GRAPH_LEARNING_PHASES[self._learning_phase_key()] = phase

    @contextmanager
    def learning_phase_scope(self, value: Union[bool, int]) -> Iterator[None]:
        """
        Temporarily set the learning phase, restoring the previous state.
        """
        phase = GraphLearningPhase.parse(value)
        key = self._learning_phase_key()
        had_previous = key in self._GRAPH_LEARNING_PHASES
        previous = self._GRAPH_LEARNING_PHASES.get(key)
        self._GRAPH_LEARNING_PHASES[key] = phase
        try:
            yield
        finally:
            if had_previous:
                self._GRAPH_LEARNING_PHASES[key] = previous
            else:
                self._GRAPH_LEARNING_PHASES.pop(key, None)

    # ==================================================================
    # Tensors and variables
    # ==================================================================
    def placeholder(
        self,
        shape: Optional[Sequence[Optional[int]]] = None,
        ndim: Optional[int] = None,
        dtype: Any = None,
        sparse: bool = False,
        name: Optional[str] = None,
        ragged: bool = False,
    ) -> Tensor:
        """
        Create a placeholder tensor.

        Parameters
        ----------
        shape : Optional[Sequence[Optional[int]]]
            Static shape; None / -1 entries are unknown dims.
        ndim : Optional[int]
            Rank to use when `shape` is None.
        dtype : dtype-like, optional
            Defaults to `floatx()`.
        sparse, ragged : bool
            Not supported.
        name : Optional[str]
            Placeholder name.

        Raises
        ------
        UnsupportedOperationError
            If `sparse` or `ragged` is requested.
        """
        if sparse:
            raise UnsupportedOperationError("placeholder", "sparse is true")
        if ragged:
            raise UnsupportedOperationError("placeholder", "ragged is true")

        dtype = np.dtype(dtype if dtype is not None else self.floatx())
        if shape is None and ndim is not None:
            shape = (None,) * ndim
        name = name or "Placeholder"

        if context.executing_eagerly():
            with self.get_graph().as_default():
                return array_ops.placeholder(dtype=dtype, shape=shape, name=name)
        return array_ops.placeholder(dtype=dtype, shape=shape, name=name)

    def is_placeholder(self, x: Any) -> bool:
        return isinstance(x, Tensor) and x.op.type == "Placeholder"

    def variable(
        self, value: Any, dtype: Any = None, name: Optional[str] = None
    ) -> Variable:
        """Create a variable (default dtype `floatx()`) and track it."""
        v = Variable(value, dtype=np.dtype(dtype or self.floatx()), name=name)
        self.track_variable(v)
        return v

    def constant(
        self,
        value: Any,
        dtype: Any = None,
        shape: Optional[Sequence[int]] = None,
        name: Optional[str] = None,
    ) -> Tensor:
        return array_ops.constant(
            value, dtype=dtype or self.floatx(), shape=shape, name=name or "Const"
        )

    def int_shape(self, x: Any) -> Optional[tuple[Optional[int], ...]]:
        """Static shape of `x` as a tuple of ints / None."""
        if isinstance(x, Variable):
            return x.shape
        if isinstance(x, Tensor):
            return x.shape
        return tuple(np.shape(x))

    def ndim(self, x: Any) -> Optional[int]:
        shape = self.int_shape(x)
        return None if shape is None else len(shape)

    def dtype(self, x: Any) -> str:
        return np.dtype(x.dtype).name

    def shape(self, x: Any) -> Tensor:
        """Dynamic shape of `x` as an int32 tensor."""
        return array_ops.shape(x)

    def get_value(self, x: Any) -> np.ndarray:
        """
        Return the NumPy value of a variable or tensor.

        In graph mode the read goes through `get_session()`, so tracked
        variables are initialized first unless manual initialization is on.
        """
        if not context.executing_eagerly_outside_functions():
            session = self.get_session()
            if isinstance(x, Variable):
                return x.numpy()
            x = convert_to_tensor(x)
            return session.run(x) if x.is_symbolic else x.numpy()
        if isinstance(x, Variable):
            return x.numpy()
        x = convert_to_tensor(x)
        if not x.is_symbolic:
            return x.numpy()
        return self.eval_in_eager_or_function(x)

    def batch_get_value(self, tensors: Sequence[Any]) -> list[np.ndarray]:
        return [self.get_value(x) for x in tensors]

    def set_value(self, x: Variable, value: Any) -> None:
        self.batch_set_value([(x, value)])

    def batch_set_value(self, tuples: Sequence[tuple[Variable, Any]]) -> None:
        """
        Assign several variables at once.

        Raises
        ------
        UnsupportedOperationError
            If the outermost context is not executing eagerly.
        """
        if not context.executing_eagerly_outside_functions():
            raise UnsupportedOperationError(
                "batch_set_value", "assigning values in graph mode is not supported"
            )
        for x, value in tuples:
            x.assign(np.asarray(value, dtype=x.dtype), read_value=False)

    def eval(self, x: Any) -> np.ndarray:
        return self.get_value(x)

    def eval_in_eager_or_function(
        self, outputs: Union[Tensor, Sequence[Tensor]]
    ) -> Union[np.ndarray, list[np.ndarray]]:
        """
        Evaluate tensors in eager mode or through a function graph.

        Parameters
        ----------
        outputs : Tensor or Sequence[Tensor]
            Tensors to evaluate.

        Returns
        -------
        np.ndarray or list[np.ndarray]
            A single value for a single tensor, else a list of values.

        Notes
        -----
        - A tensor produced by a `Const` op is answered from the constant.
        - Tensors living in the keras graph are lifted into the scratch graph
          (placeholders and variable reads become captures), which is then
          wrapped in a `ConcreteFunction` and called. The scratch graph is
          discarded afterwards.

        Raises
        ------
        PlaceholderNotFedError
            If a placeholder without a default value is reached.
        """
        single = isinstance(outputs, (Tensor, Variable))
        outs = [convert_to_tensor(o) for o in ([outputs] if single else outputs)]
        if not outs:
            raise ValueError("eval_in_eager_or_function requires at least one tensor")

        if single and outs[0].op.type == "Const":
            return np.array(array_ops.constant_value(outs[0]))
        if all(not o.is_symbolic for o in outs):
            values = [o.numpy() for o in outs]
            return values[0] if single else values

        source_graph = outs[0].graph
        exec_graph = self._scratch_graph()
        global_graph = self.get_graph()

        context.switch_to(True)
        try:
            if source_graph is global_graph and exec_graph is not global_graph:
                lift_to_graph(
                    outs,
                    exec_graph,
                    sources=[],
                    add_sources=True,
                    handle_captures=True,
                    base_graph=source_graph,
                )

            with exec_graph.as_default():
                exec_graph.inputs = exec_graph.internal_captures
                exec_graph.outputs = outs
                graph_fn = ConcreteFunction(exec_graph)
        finally:
            self._CURRENT_SCRATCH_GRAPH = None
            context.restore_mode()

        values = graph_fn()
        return values[0] if single else values

    # ==================================================================
    # Math forwarding
    # ==================================================================
    def mean(self, x: TensorLike, axis: Any = None, keepdims: bool = False) -> Tensor:
        """
        Mean of `x` along `axis`; boolean inputs are cast to `floatx()` first.
        """
        x = convert_to_tensor(x)
        if x.dtype == np.bool_:
            x = math_ops.cast(x, self.floatx())
        return math_ops.reduce_mean(x, axis=axis, keepdims=keepdims)

    def sum(self, x: TensorLike, axis: Any = None, keepdims: bool = False) -> Tensor:
        """
        Sum of `x` along `axis`; boolean inputs are cast to `floatx()` first.
        """
        x = convert_to_tensor(x)
        if x.dtype == np.bool_:
            x = math_ops.cast(x, self.floatx())
        return math_ops.reduce_sum(x, axis=axis, keepdims=keepdims)

    def clip(self, x: TensorLike, min_value: Any, max_value: Any) -> Tensor:
        """
        Clip `x` to [min_value, max_value].

        When both bounds are Python scalars and `max_value < min_value`, the
        range collapses to `min_value`. None bounds are unbounded.
        """
        if (
            isinstance(min_value, (int, float))
            and isinstance(max_value, (int, float))
            and max_value < min_value
        ):
            max_value = min_value
        if min_value is None:
            min_value = -np.inf
        if max_value is None:
            max_value = np.inf
        return math_ops.clip_by_value(x, min_value, max_value)

    def log(self, x: TensorLike) -> Tensor:
        return math_ops.log(x)

    def cast(self, x: TensorLike, dtype: Any) -> Tensor:
        return math_ops.cast(x, dtype)

    def softmax(self, x: TensorLike, axis: int = -1) -> Tensor:
        return nn_ops.softmax(x, axis=axis)

    def sigmoid(self, x: TensorLike) -> Tensor:
        return nn_ops.sigmoid(x)

    def permute_dimensions(self, x: TensorLike, pattern: Sequence[int]) -> Tensor:
        return array_ops.transpose(x, perm=pattern)

    def reshape(self, x: TensorLike, shape: Any) -> Tensor:
        return array_ops.reshape(x, shape)

    def flatten(self, x: TensorLike) -> Tensor:
        return array_ops.reshape(x, [-1])

    # ==================================================================
    # Losses
    # ==================================================================
    def categorical_crossentropy(
        self,
        target: TensorLike,
        output: TensorLike,
        from_logits: bool = False,
        axis: int = -1,
    ) -> Tensor:
        """
        Categorical crossentropy between an output tensor and a target tensor.

        Parameters
        ----------
        target : tensor-like
            One-hot (or soft) targets with the same shape as `output`.
        output : tensor-like
            Probabilities, or logits when `from_logits` is True.
        from_logits : bool, default False
            Whether `output` holds unnormalized logits.
        axis : int, default -1
            Class axis.

        Returns
        -------
        Tensor
            Per-sample loss with `axis` reduced away.

        Notes
        -----
        When `output` was produced by a `Softmax` op, its input is used as
        logits for a numerically stable computation. Otherwise probabilities
        are rescaled to sum to 1 along `axis` and clipped to
        [epsilon, 1 - epsilon] before taking the log.

        Raises
        ------
        ValueError
            If `target` and `output` have incompatible static shapes.
        """
        output = convert_to_tensor(output)
        target = math_ops.cast(convert_to_tensor(target), output.dtype)
        if not _shape.is_compatible(target.shape, output.shape):
            raise ValueError(
                "Arguments `target` and `output` must have the same shape. "
                f"Received: target.shape={target.shape}, output.shape={output.shape}"
            )

        if from_logits:
            if output.op.type == "Softmax":
                warnings.warn(
                    '"`categorical_crossentropy` received `from_logits=True`, but '
                    "the `output` argument was produced by a Softmax activation "
                    'and thus does not represent logits. Was this intended?"',
                    UserWarning,
                    stacklevel=2,
                )
            return nn_ops.softmax_cross_entropy_with_logits(
                labels=target, logits=output, axis=axis
            )

        if output.op.type == "Softmax":
            logits = self._single_input(output)
            return nn_ops.softmax_cross_entropy_with_logits(
                labels=target, logits=logits, axis=axis
            )

        # scale preds so that the class probas of each sample sum to 1
        output = output / math_ops.reduce_sum(output, axis, True)
        epsilon_ = array_ops.constant(self.epsilon(), dtype=output.dtype)
        output = math_ops.clip_by_value(output, epsilon_, 1.0 - epsilon_)
        return -math_ops.reduce_sum(target * math_ops.log(output), axis)

    def sparse_categorical_crossentropy(
        self,
        target: TensorLike,
        output: TensorLike,
        from_logits: bool = False,
        axis: int = -1,
        ignore_class: Optional[int] = None,
    ) -> Tensor:
        """
        Categorical crossentropy with integer targets.

        Parameters
        ----------
        target : tensor-like
            Integer class indices.
        output : tensor-like
            Probabilities, or logits when `from_logits` is True.
        from_logits : bool, default False
            Whether `output` holds unnormalized logits.
        axis : int, default -1
            Class axis of `output`; moved last when it is not already.
        ignore_class : Optional[int]
            Target value whose positions contribute a loss of 0. The result
            then carries a `keras_mask` marking the valid positions.

        Raises
        ------
        ValueError
            If the rank of `output` is unknown and `axis` is not -1.
        """
        target = math_ops.cast(convert_to_tensor(target), np.int64)
        output = convert_to_tensor(output)

        if not from_logits and output.op.type == "Softmax":
            output = self._single_input(output)
            from_logits = True
        elif not from_logits:
            epsilon_ = array_ops.constant(self.epsilon(), dtype=output.dtype)
            output = math_ops.clip_by_value(output, epsilon_, 1 - epsilon_)
            output = math_ops.log(output)

        output_rank = output.ndim
        if output_rank is not None:
            axis %= output_rank
            if axis != output_rank - 1:
                permutation = (
                    list(range(axis)) + list(range(axis + 1, output_rank)) + [axis]
                )
                output = array_ops.transpose(output, perm=permutation)
        elif axis != -1:
            raise ValueError(
                "Cannot compute sparse categorical crossentropy with "
                f"`axis={axis}` on an output tensor with unknown rank."
            )

        output_shape = array_ops.shape(output)
        target_rank = target.ndim
        update_shape = (
            target_rank is not None
            and output_rank is not None
            and target_rank != output_rank - 1
        )
        if update_shape:
            target = self.flatten(target)
            num_classes = output.shape[-1]
            if num_classes is not None:
                output = array_ops.reshape(output, [-1, num_classes])
            else:
                output = array_ops.reshape(
                    output, array_ops.stack([-1, output_shape[-1]])
                )

        if ignore_class is not None:
            valid_mask = math_ops.not_equal(target, ignore_class)
            safe_target = array_ops.where(valid_mask, target, 0)
            res = nn_ops.sparse_softmax_cross_entropy_with_logits(
                labels=safe_target, logits=output
            )
            res = array_ops.where(valid_mask, res, 0)
            if update_shape:
                res = array_ops.reshape(res, output_shape[:-1])
                valid_mask = array_ops.reshape(valid_mask, output_shape[:-1])
            res.keras_mask = valid_mask
            return res

        res = nn_ops.sparse_softmax_cross_entropy_with_logits(
            labels=target, logits=output
        )
        if update_shape and output_rank >= 3:
            # If our output includes timesteps or spatial dimensions we need
            # to reshape.
            res = array_ops.reshape(res, output_shape[:-1])
        return res

    def binary_crossentropy(
        self, target: TensorLike, output: TensorLike, from_logits: bool = False
    ) -> Tensor:
        """
        Binary crossentropy between an output tensor and a target tensor.

        When `output` was produced by a `Sigmoid` op its input is used as
        logits. Otherwise probabilities are clipped to [epsilon, 1 - epsilon]
        and the elementwise loss
        `-(target * log(output + eps) + (1 - target) * log(1 - output + eps))`
        is returned.
        """
        output = convert_to_tensor(output)
        target = math_ops.cast(convert_to_tensor(target), output.dtype)

        if from_logits:
            if output.op.type == "Sigmoid":
                warnings.warn(
                    '"`binary_crossentropy` received `from_logits=True`, but the '
                    "`output` argument was produced by a Sigmoid activation and "
                    'thus does not represent logits. Was this intended?"',
                    UserWarning,
                    stacklevel=2,
                )
            return nn_ops.sigmoid_cross_entropy_with_logits(labels=target, logits=output)

        if output.op.type == "Sigmoid":
            logits = self._single_input(output)
            return nn_ops.sigmoid_cross_entropy_with_logits(labels=target, logits=logits)

        epsilon_ = array_ops.constant(self.epsilon(), dtype=output.dtype)
        output = math_ops.clip_by_value(output, epsilon_, 1.0 - epsilon_)

        # Compute cross entropy from probabilities.
        bce = target * math_ops.log(output + self.epsilon())
        bce += (1 - target) * math_ops.log(1 - output + self.epsilon())
        return -bce

    @staticmethod
    def _single_input(t: ITensor) -> ITensor:
        if len(t.op.inputs) != 1:
            raise RuntimeError(
                f"Expected '{t.op.name}' ({t.op.type}) to have exactly one input, "
                f"got {len(t.op.inputs)}."
            )
        return t.op.inputs[0]

    # ==================================================================
    # Image / spatial ops
    # ==================================================================
    def resize_images(
        self,
        x: TensorLike,
        height_factor: int,
        width_factor: int,
        data_format: str,
        interpolation: str = "nearest",
    ) -> Tensor:
        """
        Resizes the images contained in a 4D tensor.

        Parameters
        ----------
        x : tensor-like
            4D image batch.
        height_factor, width_factor : int
            Positive integer scale factors.
        data_format : str
            "channels_first" or "channels_last".
        interpolation : str, default "nearest"
            "nearest" or "bilinear".

        Raises
        ------
        ValueError
            For an invalid `data_format` or unknown `interpolation`.
        UnsupportedOperationError
            For a known interpolation the NumPy engine does not implement.
        """
        fmt = DataFormat.parse(data_format)
        rows, cols = fmt.spatial_axes
        method = Interpolation.parse(interpolation)
        if not method.is_supported:
            raise UnsupportedOperationError(
                "resize_images", f"interpolation '{method.value}' is not supported"
            )

        x = convert_to_tensor(x)
        if x.ndim is not None and x.ndim != 4:
            raise ValueError(f"resize_images expects a 4D tensor, got rank {x.ndim}")
        original_shape = x.shape

        factors = np.array([height_factor, width_factor], dtype=np.int32)
        spatial = None if original_shape is None else original_shape[rows : cols + 1]
        if _shape.is_fully_defined(spatial):
            new_shape = array_ops.constant(np.array(spatial, dtype=np.int32) * factors)
        else:
            new_shape = array_ops.shape(x)[rows : cols + 1] * array_ops.constant(factors)

        if fmt is DataFormat.CHANNELS_FIRST:
            x = array_ops.transpose(x, [0, 2, 3, 1])
        x = image_ops.resize_images_v2(x, new_shape, method=method)
        if fmt is DataFormat.CHANNELS_FIRST:
            x = array_ops.transpose(x, [0, 3, 1, 2])

        def _scaled(dim: Optional[int], factor: int) -> Optional[int]:
            return None if dim is None else dim * factor

        new_height = None if spatial is None else _scaled(spatial[0], height_factor)
        new_width = None if spatial is None else _scaled(spatial[1], width_factor)
        if fmt is DataFormat.CHANNELS_FIRST:
            output_shape = (None, None, new_height, new_width)
        else:
            output_shape = (None, new_height, new_width, None)
        x.set_shape(output_shape)
        return x

    def temporal_padding(
        self, x: TensorLike, padding: Sequence[int] = (1, 1)
    ) -> Tensor:
        """Pads the middle dimension of a 3D tensor."""
        if len(padding) != 2:
            raise ValueError(f"padding must be a pair of ints, got {padding}")
        pattern = [[0, 0], [padding[0], padding[1]], [0, 0]]
        return array_ops.pad(x, pattern)

    def spatial_2d_padding(
        self,
        x: TensorLike,
        padding: Sequence[Sequence[int]] = ((1, 1), (1, 1)),
        data_format: Optional[str] = None,
    ) -> Tensor:
        """
        Pads the 2nd and 3rd dimensions of a 4D tensor.

        Parameters
        ----------
        x : tensor-like
            4D tensor.
        padding : ((top, bottom), (left, right)), default ((1, 1), (1, 1))
            Zero padding for the two spatial dimensions.
        data_format : Optional[str]
            Layout; defaults to `image_data_format()`.

        Raises
        ------
        ValueError
            For malformed `padding` or an invalid `data_format`.
        """
        if len(padding) != 2 or any(len(p) != 2 for p in padding):
            raise ValueError(
                f"padding must be ((top, bottom), (left, right)), got {padding}"
            )
        fmt = DataFormat.parse(self.normalize_data_format(data_format))

        spatial = [[padding[0][0], padding[0][1]], [padding[1][0], padding[1][1]]]
        if fmt is DataFormat.CHANNELS_FIRST:
            pattern = [[0, 0], [0, 0]] + spatial
        else:
            pattern = [[0, 0]] + spatial + [[0, 0]]
        return array_ops.pad(x, pattern)

    def spatial_3d_padding(
        self,
        x: TensorLike,
        padding: Sequence[Sequence[int]] = ((1, 1), (1, 1), (1, 1)),
        data_format: Optional[str] = None,
    ) -> Tensor:
        """Pads the three spatial dimensions of a 5D tensor."""
        if len(padding) != 3 or any(len(p) != 2 for p in padding):
            raise ValueError(
                "padding must be ((d0_before, d0_after), (d1_before, d1_after), "
                f"(d2_before, d2_after)), got {padding}"
            )
        fmt = DataFormat.parse(self.normalize_data_format(data_format))

        spatial = [[p[0], p[1]] for p in padding]
        if fmt is DataFormat.CHANNELS_FIRST:
            pattern = [[0, 0], [0, 0]] + spatial
        else:
            pattern = [[0, 0]] + spatial + [[0, 0]]
        return array_ops.pad(x, pattern)

    def concatenate(self, tensors: Sequence[TensorLike], axis: int = -1) -> Tensor:
        """
        Concatenates a list of tensors alongside the specified axis.

        A negative `axis` is shifted by the rank of the first tensor; when that
        rank is unknown, axis 0 is used.
        """
        tensors = [convert_to_tensor(t) for t in tensors]
        if not tensors:
            raise ValueError("concatenate requires at least one tensor")
        if axis < 0:
            rank = tensors[0].ndim
            axis = axis + rank if rank is not None else 0
        return array_ops.concat(tensors, axis)

    def conv2d_transpose(
        self,
        x: TensorLike,
        kernel: Union[Variable, TensorLike],
        output_shape: Any,
        strides: Sequence[int] = (1, 1),
        padding: str = "valid",
        data_format: Optional[str] = None,
        dilation_rate: Sequence[int] = (1, 1),
    ) -> Tensor:
        """
        2D deconvolution (i.e. transposed convolution).

        Parameters
        ----------
        x : tensor-like
            4D input.
        kernel : Variable or tensor-like
            Kernel of shape (K_h, K_w, out_channels, in_channels).
        output_shape : sequence of 4 ints (batch may be None) or 1D tensor
            Output shape in the layout given by `data_format`.
        strides : Sequence[int], default (1, 1)
            Spatial strides.
        padding : str, default "valid"
            "valid" or "same" (case-insensitive).
        data_format : Optional[str]
            Layout; defaults to `image_data_format()`.
        dilation_rate : Sequence[int], default (1, 1)
            Only (1, 1) is supported.

        Raises
        ------
        ValueError
            For an invalid `padding` or `data_format`.
        UnsupportedOperationError
            For a dilation rate other than (1, 1).
        """
        fmt = DataFormat.parse(self.normalize_data_format(data_format))
        mode = PaddingMode.parse(padding)
        if tuple(int(d) for d in dilation_rate) != (1, 1):
            raise UnsupportedOperationError(
                "conv2d_transpose", "dilation_rate other than (1, 1) is not supported"
            )

        x = convert_to_tensor(x)
        channels_first = fmt is DataFormat.CHANNELS_FIRST

        if isinstance(output_shape, (Tensor, Variable)):
            output_shape = convert_to_tensor(output_shape)
            if channels_first:
                output_shape = array_ops.strided_slice(output_shape, [0, 2, 3, 1])
        else:
            output_shape = list(output_shape)
            if len(output_shape) != 4:
                raise ValueError(
                    f"output_shape must have 4 entries, got {tuple(output_shape)}"
                )
            if channels_first:
                output_shape = [
                    output_shape[0],
                    output_shape[2],
                    output_shape[3],
                    output_shape[1],
                ]
            if output_shape[0] is None:
                output_shape[0] = array_ops.shape(x)[0]
            if any(isinstance(d, Tensor) for d in output_shape):
                output_shape = array_ops.stack(output_shape)

        if channels_first:
            x = array_ops.transpose(x, (0, 2, 3, 1))

        strides = (1, int(strides[0]), int(strides[1]), 1)
        x = nn_ops.conv2d_transpose(
            x,
            kernel,
            output_shape,
            strides,
            padding=str(mode),
            data_format="NHWC",
        )

        if channels_first:
            x = array_ops.transpose(x, (0, 3, 1, 2))
        return x
