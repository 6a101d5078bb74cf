"""
Operation node interface definitions.

This module defines the abstract base class for the units of computation
placed in an execution graph. A concrete `Operation` implements both the
forward value of the node and its local gradient rule.

The design follows function-level autograd systems: the operation does not
know the graph it lives in. The graph passes the current forward values of
the node's inputs to `forward`, and during the backward pass hands back the
same inputs together with the cached output and the incoming error.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Sequence

from ._tensor import ITensor


class Operation(ABC):
    """
    Abstract base class for graph operations.

    Subclasses declare a fixed `arity` and implement `forward` and `partial`.

    Notes
    -----
    - `forward` must be a pure function of the current values of its inputs
      and must not mutate them.
    - `partial` returns the gradient for one input, or None when no gradient
      flows to that input (e.g. a non-differentiable repetition count).
    - Operations holding a value (constants, parameters, variables) have
      arity 0 and never receive a `partial` call.
    """

    arity: ClassVar[int] = 0

    @property
    def is_constant(self) -> bool:
        """
        Indicate whether the node's value is fixed for the lifetime of the graph.
        """
        return False

    @property
    def is_trainable(self) -> bool:
        """
        Indicate whether the node holds a parameter mutated by an optimizer.
        """
        return False

    @abstractmethod
    def forward(self, inputs: Sequence[ITensor]) -> ITensor:
        """
        Compute the node's value.

        Parameters
        ----------
        inputs : Sequence[ITensor]
            Current forward values of the node's inputs, in wiring order.

        Returns
        -------
        ITensor
            The node's output.
        """
        ...

    @abstractmethod
    def partial(
        self,
        input_id: int,
        inputs: Sequence[ITensor],
        output: ITensor,
        error: ITensor,
    ) -> Optional[ITensor]:
        """
        Compute the gradient to propagate to one input.

        Parameters
        ----------
        input_id : int
            Index of the input in wiring order.
        inputs : Sequence[ITensor]
            Forward values of the inputs from the last forward pass.
        output : ITensor
            The node's cached forward output.
        error : ITensor
            Gradient of the final scalar loss with respect to `output`.

        Returns
        -------
        Optional[ITensor]
            Gradient with respect to ``inputs[input_id]``, or None if no
            gradient flows to that input.
        """
        ...

    def describe(self) -> str:
        """Return a short description of the operation."""
        return type(self).__name__
