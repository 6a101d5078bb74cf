"""
Execution graph with reverse-mode automatic differentiation.

This module defines `ExecutionGraph`, an arena of `Node` records addressed by
integer handles. Each node wraps an `Operation` and references its inputs by
handle, so the graph owns every node and no node holds references to its
consumers.

Algorithm
---------
Forward:
    Variables are fed in declaration order, then every node is evaluated in
    insertion order and its output cached.

Backward:
    All accumulators are cleared and the output node is seeded with the given
    error. Nodes are then visited in reverse insertion order. Because inputs
    must exist before a node is added, every consumer of a node is visited
    before the node itself, so its error is complete when it is propagated.
    For each input whose value does not derive only from constants the
    operation's ``partial`` is called and the result summed into the input's
    accumulator.

Design notes
------------
- Cycles cannot be constructed: `add` rejects handles that do not exist yet.
- Arity is checked when a node is added, never during a pass.
- The graph never mutates parameter tensors; `train` hands each parameter's
  accumulated error to an optimizer, which mutates the tensor in place.
"""

from __future__ import annotations

import warnings
from typing import Callable, List, Optional

from ...domain._errors import DimensionMismatchError, GraphWiringError, NodeArityError
from ...domain._operation import Operation
from ...domain._optimizers import IOptimizer
from ..operations._sources import Constant, Parameter, Variable
from ..tensor._tensor import Tensor
from ._node import Node


class ExecutionGraph:
    """
    Directed acyclic graph of operations supporting forward evaluation and
    backpropagation.

    Examples
    --------
    >>> import numpy as np
    >>> from nodegrad import ExecutionGraph, MatMul, Matrix
    >>> graph = ExecutionGraph()
    >>> x = graph.variable()
    >>> w = graph.parameter(Matrix.from_numpy(np.ones((3, 2))))
    >>> graph.set_output(graph.add(MatMul(), x, w))
    >>> graph.forward(Matrix.from_numpy(np.ones((4, 3)))).to_numpy()
    array([[3., 3.],
           [3., 3.],
           [3., 3.],
           [3., 3.]])
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._variables: List[int] = []
        self._output: Optional[int] = None

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def add(self, operation: Operation, *inputs: int) -> int:
        """
        Place `operation` in the graph, wired to the given input handles.

        Parameters
        ----------
        operation : Operation
            The operation to add.
        *inputs : int
            Handles of already-added nodes, in the operation's input order.

        Returns
        -------
        int
            Handle of the new node.

        Raises
        ------
        NodeArityError
            If the number of inputs differs from ``operation.arity``.
        GraphWiringError
            If an input handle does not refer to an existing node.
        """
        if len(inputs) != operation.arity:
            raise NodeArityError(operation.describe(), operation.arity, len(inputs))
        for handle in inputs:
            self._node(handle)

        handle = len(self._nodes)
        constant = operation.is_constant or (
            bool(inputs) and all(self._nodes[i].constant for i in inputs)
        )
        self._nodes.append(
            Node(
                handle=handle,
                operation=operation,
                inputs=tuple(inputs),
                constant=constant,
            )
        )
        if isinstance(operation, Variable):
            self._variables.append(handle)
        return handle

    def constant(self, value: Tensor) -> int:
        """Add a `Constant` node holding `value`."""
        return self.add(Constant(value))

    def parameter(self, value: Tensor) -> int:
        """Add a trainable `Parameter` node holding `value`."""
        return self.add(Parameter(value))

    def variable(self) -> int:
        """Add a `Variable` node fed on every `forward` call."""
        return self.add(Variable())

    def set_output(self, handle: int) -> None:
        """Designate the node whose value `forward` returns."""
        self._node(handle)
        self._output = handle

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    def _node(self, handle: int) -> Node:
        if not isinstance(handle, int) or not 0 <= handle < len(self._nodes):
            raise GraphWiringError(f"Unknown node handle {handle!r}")
        return self._nodes[handle]

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def output(self) -> Optional[int]:
        return self._output

    def operation(self, handle: int) -> Operation:
        return self._node(handle).operation

    def value(self, handle: int) -> Optional[Tensor]:
        """
        Return the value cached at `handle` by the last forward pass.
        """
        return self._node(handle).output

    def gradient(self, handle: int) -> Optional[Tensor]:
        """
        Return the error accumulated at `handle` by the last backward pass,
        or None if no error reached the node.
        """
        return self._node(handle).error

    def parameters(self) -> List[int]:
        """
        Return the handles of all trainable nodes, in insertion order.
        """
        return [n.handle for n in self._nodes if n.operation.is_trainable]

    def parameter_tensors(self) -> List[Tensor]:
        return [self._nodes[h].operation.value for h in self.parameters()]

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------
    def forward(self, *values: Tensor) -> Tensor:
        """
        Evaluate the graph.

        Parameters
        ----------
        *values : Tensor
            One value per declared variable, in declaration order.

        Returns
        -------
        Tensor
            The value of the output node.

        Raises
        ------
        GraphWiringError
            If no output is set or the number of values does not match the
            number of variables.
        DimensionMismatchError
            If a node receives incompatible inputs. The error names the node.
        """
        if self._output is None:
            raise GraphWiringError("No output node has been set")
        if len(values) != len(self._variables):
            raise GraphWiringError(
                f"Expected {len(self._variables)} variable value(s) but given {len(values)}"
            )
        for handle, value in zip(self._variables, values):
            self._nodes[handle].operation.feed(value)

        for node in self._nodes:
            node.reset_error()
            args = [self._nodes[i].output for i in node.inputs]
            try:
                node.output = node.operation.forward(args)
            except DimensionMismatchError as e:
                raise DimensionMismatchError(
                    e.left,
                    e.right,
                    f"node {node.handle} {node.operation.describe()}"
                    + (f": {e.detail}" if e.detail else ""),
                ) from e
        return self._nodes[self._output].output

    def backward(self, error: Tensor) -> None:
        """
        Propagate `error` from the output node back to every parameter.

        Parameters
        ----------
        error : Tensor
            Gradient of the loss with respect to the output value. Its shape
            must match the output's shape.

        Raises
        ------
        GraphWiringError
            If `forward` has not been run.
        DimensionMismatchError
            If `error` does not match the output's shape.
        """
        if self._output is None:
            raise GraphWiringError("No output node has been set")
        output = self._nodes[self._output].output
        if output is None:
            raise GraphWiringError("backward called before forward")
        output.assert_matching(error)

        for node in self._nodes:
            node.reset_error()
        self._nodes[self._output].accumulate_error(error)

        for node in reversed(self._nodes[: self._output + 1]):
            if node.error is None or not node.inputs:
                continue
            args = [self._nodes[i].output for i in node.inputs]
            for input_id, handle in enumerate(node.inputs):
                target = self._nodes[handle]
                if target.constant:
                    continue
                grad = node.operation.partial(input_id, args, node.output, node.error)
                if grad is not None:
                    target.accumulate_error(grad)

    # ------------------------------------------------------------------
    # Training helpers
    # ------------------------------------------------------------------
    def train(self, optimizer: IOptimizer) -> None:
        """
        Apply `optimizer` to every parameter using its accumulated error.

        Parameters that received no error in the last backward pass are
        skipped with a warning.
        """
        for handle in self.parameters():
            node = self._nodes[handle]
            if node.error is None:
                warnings.warn(
                    f"Parameter node {handle} received no gradient and was not updated",
                    RuntimeWarning,
                    stacklevel=2,
                )
                continue
            optimizer.update(node.operation.value, node.error)

    def init(self, initializer: Callable[[Tensor], Tensor]) -> None:
        """
        Apply `initializer` (e.g. a `WeightInitializer`) to every parameter
        tensor in place.
        """
        for tensor in self.parameter_tensors():
            initializer(tensor)


__all__ = [ExecutionGraph.__name__]
