"""
Tensor-, graph- and optimizer-related exceptions for nodegrad.

This module defines the error taxonomy raised by the numeric core. Every
error is raised at the point the problem is detected and is never retried
internally: each one indicates either a malformed graph, an indexing bug in
node wiring, or numerically diverging training.

The exceptions subclass the closest built-in category (`ValueError`,
`IndexError`, `TypeError`, `RuntimeError`) so callers can catch them either
precisely or generically.
"""


class DimensionMismatchError(ValueError):
    """
    Raised when a binary tensor/matrix operation receives incompatible shapes.

    Attributes
    ----------
    left : str
        Description of the first operand (see `Tensor.describe`).
    right : str
        Description of the second operand.
    """

    def __init__(self, left: str, right: str, detail: str = "") -> None:
        """
        Initialize the DimensionMismatchError.

        Parameters
        ----------
        left : str
            Description of the first operand.
        right : str
            Description of the second operand.
        detail : str, optional
            Extra context (e.g. the node that failed). Defaults to "".
        """
        message = f"Non-compliant: {left} vs {right}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.left = left
        self.right = right
        self.detail = detail


class TensorIndexError(IndexError, ValueError):
    """
    Raised when `get`/`put` addresses a position outside ``[0, size)``, or a
    matrix element outside its ``rows x cols`` extent.

    Attributes
    ----------
    pos : object
        The offending position (an int, or a ``(row, col)`` pair).
    bound : str
        Description of the valid range.
    """

    def __init__(self, pos: object, bound: str) -> None:
        super().__init__(f"Position {pos} is out of range {bound}")
        self.pos = pos
        self.bound = bound


class NonFiniteValueError(ValueError):
    """
    Raised when a NaN is written into a tensor, or when `assert_finite`
    encounters a NaN or infinite element.

    Attributes
    ----------
    pos : int
        Position of the offending element.
    value : float
        The offending value.
    """

    def __init__(self, pos: int, value: float) -> None:
        super().__init__(f"Did not find a finite value at position {pos}: {value}")
        self.pos = pos
        self.value = value


class HyperparameterRangeError(ValueError):
    """
    Raised when an optimizer is constructed with a hyperparameter outside its
    valid range.

    Attributes
    ----------
    name : str
        Hyperparameter name (e.g. "b1").
    value : float
        The rejected value.
    valid_range : str
        Human-readable description of the accepted interval.
    """

    def __init__(self, name: str, value: float, valid_range: str) -> None:
        super().__init__(
            f"{name} values should be in the range {valid_range} but given {value}"
        )
        self.name = name
        self.value = value
        self.valid_range = valid_range


class NodeArityError(TypeError):
    """
    Raised when an operation node is wired with the wrong number of inputs.

    This is a construction-time error: the graph checks arity when the node
    is added, never during forward or backward passes.
    """

    def __init__(self, operation: str, expected: int, given: int) -> None:
        super().__init__(f"{operation} expects {expected} input(s) but given {given}")
        self.operation = operation
        self.expected = expected
        self.given = given


class GraphWiringError(ValueError):
    """
    Raised when a graph is wired inconsistently, e.g. a node references an
    input handle that does not exist yet, no output has been designated, or
    the number of fed values does not match the declared variables.
    """


class ReadOnlyViewError(RuntimeError):
    """
    Raised when `put` is called on a view matrix/tensor that was not declared
    mutable.
    """

    def __init__(self, view: str) -> None:
        super().__init__(f"Cannot write into read-only view {view}")
        self.view = view
