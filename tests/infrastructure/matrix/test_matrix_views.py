import unittest

import numpy as np

from src.nodegrad.domain._errors import DimensionMismatchError, ReadOnlyViewError
from src.nodegrad.infrastructure.matrix._matrix import DenseMatrix, Matrix, SparseMatrix
from src.nodegrad.infrastructure.matrix._views import (
    AccessCol,
    AccessRow,
    ColumnRepetition,
    RowCollection,
)
from src.nodegrad.infrastructure.tensor._tensor import DenseTensor, SparseTensor, Tensor


class TestColumnRepetition(unittest.TestCase):
    def test_every_column_is_the_vector(self):
        v = Tensor.from_numpy([1.0, 2.0])
        view = ColumnRepetition(3, v)
        self.assertEqual(view.shape, (2, 3))
        np.testing.assert_array_equal(view.to_numpy(), [[1.0, 1.0, 1.0], [2.0, 2.0, 2.0]])

    def test_reflects_backing_changes(self):
        v = Tensor.from_numpy([1.0, 2.0])
        view = ColumnRepetition(2, v)
        v.put(0, 5.0)
        self.assertEqual(view.get_element(0, 1), 5.0)

    def test_read_only_by_default(self):
        view = ColumnRepetition(2, DenseTensor(2))
        with self.assertRaises(ReadOnlyViewError):
            view.put_element(0, 0, 1.0)

    def test_mutable_writes_through(self):
        v = DenseTensor(2)
        view = ColumnRepetition(2, v, mutable=True)
        view.put_element(1, 1, 4.0)
        self.assertEqual(v.get(1), 4.0)
        self.assertEqual(view.get_element(1, 0), 4.0)

    def test_sparse_traversal(self):
        v = SparseTensor(3)
        v.put(1, 5.0)
        view = ColumnRepetition(2, v)
        self.assertTrue(view.is_sparse)
        self.assertEqual(list(view.entries()), [(1, 0), (1, 1)])

    def test_zero_copy_materializes(self):
        view = ColumnRepetition(2, Tensor.from_numpy([1.0, 2.0]))
        res = view.zero_copy()
        self.assertIsInstance(res, DenseMatrix)
        self.assertEqual(res.shape, (2, 2))
        self.assertIsInstance(ColumnRepetition(2, SparseTensor(2)).zero_copy(), SparseMatrix)

    def test_matmul_with_view(self):
        view = ColumnRepetition(2, Tensor.from_numpy([1.0, 2.0]))
        res = Matrix.from_numpy(np.eye(2)).matmul(view)
        np.testing.assert_allclose(res.to_numpy(), [[1.0, 1.0], [2.0, 2.0]])


class TestRowCollection(unittest.TestCase):
    def test_rows_are_vectors(self):
        a = Tensor.from_numpy([1.0, 2.0, 3.0])
        b = Tensor.from_numpy([4.0, 5.0, 6.0])
        view = RowCollection([a, b])
        self.assertEqual(view.shape, (2, 3))
        np.testing.assert_array_equal(view.to_numpy(), [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_write_through(self):
        a = DenseTensor(2)
        b = DenseTensor(2)
        RowCollection([a, b]).put_element(1, 0, 3.0)
        self.assertEqual(b.get(0), 3.0)

    def test_read_only(self):
        view = RowCollection([DenseTensor(2)], mutable=False)
        with self.assertRaises(ReadOnlyViewError):
            view.put(0, 1.0)

    def test_mismatched_rows(self):
        with self.assertRaises(DimensionMismatchError):
            RowCollection([DenseTensor(2), DenseTensor(3)])

    def test_sparse_rows_traversal(self):
        a = SparseTensor(3)
        b = SparseTensor(3)
        a.put(2, 1.0)
        b.put(0, 1.0)
        view = RowCollection([a, b])
        self.assertTrue(view.is_sparse)
        self.assertEqual(list(view.entries()), [(0, 2), (1, 0)])


class TestLineAccess(unittest.TestCase):
    def setUp(self):
        self.m = Matrix.from_numpy([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_access_row(self):
        row = self.m.access_row(1)
        self.assertIsInstance(row, AccessRow)
        self.assertEqual(row.size, 3)
        np.testing.assert_array_equal(row.to_numpy(), [4.0, 5.0, 6.0])
        row.put(0, 40.0)
        self.assertEqual(self.m.get_element(1, 0), 40.0)

    def test_access_col(self):
        col = self.m.access_col(2)
        self.assertIsInstance(col, AccessCol)
        np.testing.assert_array_equal(col.to_numpy(), [3.0, 6.0])
        self.m.put_element(0, 2, 30.0)
        self.assertEqual(col.get(0), 30.0)

    def test_out_of_range_line(self):
        with self.assertRaises(DimensionMismatchError):
            AccessRow(self.m, 2)
        with self.assertRaises(DimensionMismatchError):
            AccessCol(self.m, 3)

    def test_read_only_line(self):
        with self.assertRaises(ReadOnlyViewError):
            AccessRow(self.m, 0, mutable=False).put(0, 1.0)

    def test_sparse_line_traversal(self):
        m = SparseMatrix(2, 3)
        m.put_element(1, 2, 4.0)
        m.put_element(0, 0, 1.0)
        self.assertEqual(list(m.access_row(1).traverse()), [2])
        self.assertEqual(list(m.access_col(0).traverse()), [0])
        self.assertIsInstance(m.access_row(1).zero_copy(), SparseTensor)

    def test_line_dot(self):
        self.assertEqual(self.m.access_row(0).dot(self.m.access_row(1)), 4.0 + 10.0 + 18.0)


if __name__ == "__main__":
    unittest.main()
