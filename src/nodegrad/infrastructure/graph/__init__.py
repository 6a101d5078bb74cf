"""
Execution graph and its node records.
"""

from ._execution_graph import ExecutionGraph
from ._node import Node

__all__ = [
    ExecutionGraph.__name__,
    Node.__name__,
]
