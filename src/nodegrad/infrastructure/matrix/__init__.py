"""
Matrices and non-owning matrix/vector views.
"""

from ._matrix import DenseMatrix, Matrix, SparseMatrix
from ._views import AccessCol, AccessRow, ColumnRepetition, RowCollection

__all__ = [
    Matrix.__name__,
    DenseMatrix.__name__,
    SparseMatrix.__name__,
    ColumnRepetition.__name__,
    RowCollection.__name__,
    AccessRow.__name__,
    AccessCol.__name__,
]
