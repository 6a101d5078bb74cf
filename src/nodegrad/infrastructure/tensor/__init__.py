"""
Vector tensors and their storage policies.

Public API
----------
- ``Tensor``: abstract base defining every derived operation via get/put
- ``DenseTensor``: NumPy-backed vector
- ``SparseTensor``: dict-backed vector
"""

from ._tensor import DenseTensor, SparseTensor, Tensor

__all__ = [
    Tensor.__name__,
    DenseTensor.__name__,
    SparseTensor.__name__,
]
