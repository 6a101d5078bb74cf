from dataclasses import dataclass
from typing import Optional, Tuple

from ...domain._operation import Operation
from ..tensor._tensor import Tensor


@dataclass
class Node:
    """
    Arena record of one operation placed in an `ExecutionGraph`.

    A `Node` binds an operation to the handles of its inputs and caches the
    values needed for reverse-mode differentiation.

    Attributes
    ----------
    handle : int
        Position of the node in the graph's arena. Handles are assigned in
        insertion order, which is also a topological order.
    operation : Operation
        The computation performed by the node.
    inputs : tuple[int, ...]
        Handles of the input nodes, in wiring order.
    output : Optional[Tensor]
        Value cached by the last forward pass.
    error : Optional[Tensor]
        Gradient accumulated during the last backward pass, or None if no
        error reached this node.
    constant : bool
        Whether the node's value derives only from `Constant` nodes. Such
        nodes never receive error.
    """

    handle: int
    operation: Operation
    inputs: Tuple[int, ...] = ()
    output: Optional[Tensor] = None
    error: Optional[Tensor] = None
    constant: bool = False

    def accumulate_error(self, error: Tensor) -> None:
        """
        Sum `error` into the node's accumulator.

        The first contribution is copied, so later accumulation never writes
        into a tensor owned by a consumer node.
        """
        if self.error is None:
            self.error = error.copy()
        else:
            self.error.self_add(error)

    def reset_error(self) -> None:
        self.error = None
