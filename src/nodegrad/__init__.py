"""
nodegrad: a small reverse-mode automatic differentiation core for graph
neural networks.

Public API
----------
- Tensors: ``Tensor``, ``DenseTensor``, ``SparseTensor``
- Matrices and views: ``Matrix``, ``DenseMatrix``, ``SparseMatrix``,
  ``ColumnRepetition``, ``RowCollection``, ``AccessRow``, ``AccessCol``
- Operations: ``Constant``, ``Parameter``, ``Variable``, ``MatMul``, ``Sum``,
  ``Repeat``, ``Add``, ``Sigmoid``
- Graph: ``ExecutionGraph``
- Optimizers: ``Adam``, ``SGD``, ``BatchOptimizer``
- Initialization: ``WeightInitializer``, ``Uniform``, ``Normal``
"""

from .domain import *
from .infrastructure.graph import ExecutionGraph
from .infrastructure.matrix import (
    AccessCol,
    AccessRow,
    ColumnRepetition,
    DenseMatrix,
    Matrix,
    RowCollection,
    SparseMatrix,
)
from .infrastructure.operations import (
    Add,
    Constant,
    MatMul,
    Parameter,
    Repeat,
    Sigmoid,
    Sum,
    Variable,
)
from .infrastructure.optimizers import SGD, Adam, BatchOptimizer
from .infrastructure.tensor import DenseTensor, SparseTensor, Tensor
from .infrastructure.utils._distributions import Normal, Uniform
from .infrastructure.utils.weight_initializer import WeightInitializer
