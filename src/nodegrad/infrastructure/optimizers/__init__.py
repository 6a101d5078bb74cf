"""
Optimizers updating parameter tensors from their gradients.
"""

from ._adam import Adam
from ._batch import BatchOptimizer
from ._sgd import SGD

__all__ = [
    Adam.__name__,
    SGD.__name__,
    BatchOptimizer.__name__,
]
