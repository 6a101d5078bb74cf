import math
import unittest

import numpy as np

from src.nodegrad.domain._errors import (
    DimensionMismatchError,
    NonFiniteValueError,
    TensorIndexError,
)
from src.nodegrad.infrastructure.matrix._matrix import Matrix
from src.nodegrad.infrastructure.tensor._tensor import DenseTensor, SparseTensor, Tensor


def sparse_from(size: int, entries: dict) -> SparseTensor:
    t = SparseTensor(size)
    for pos, value in entries.items():
        t.put(pos, value)
    return t


class TestTensorAccess(unittest.TestCase):
    def test_new_tensors_are_zero(self):
        for t in (DenseTensor(4), SparseTensor(4)):
            self.assertEqual([t.get(i) for i in range(4)], [0.0] * 4)
            self.assertEqual(t.size, 4)
            self.assertEqual(len(t), 4)
            self.assertEqual(t.shape, (4,))

    def test_put_returns_receiver(self):
        t = DenseTensor(3)
        self.assertIs(t.put(1, 2.5), t)
        self.assertEqual(t.get(1), 2.5)

    def test_out_of_range_access_raises(self):
        for t in (DenseTensor(3), SparseTensor(3)):
            with self.assertRaises(TensorIndexError):
                t.get(3)
            with self.assertRaises(TensorIndexError):
                t.put(-1, 1.0)
            with self.assertRaises(IndexError):
                t.get(10)

    def test_nan_write_rejected(self):
        t = DenseTensor(2)
        with self.assertRaises(NonFiniteValueError) as ctx:
            t.put(0, float("nan"))
        self.assertEqual(ctx.exception.pos, 0)
        self.assertEqual(t.get(0), 0.0)

    def test_negative_size_rejected(self):
        with self.assertRaises(ValueError):
            DenseTensor(-1)

    def test_put_add(self):
        t = DenseTensor(2)
        t.put_add(1, 2.0).put_add(1, 3.0)
        self.assertEqual(t.get(1), 5.0)


class TestTraversal(unittest.TestCase):
    def test_dense_traverses_full_range(self):
        t = DenseTensor(8)
        t.put(2, 1.0)
        t.put(5, 4.0)
        self.assertEqual(list(t.traverse()), list(range(8)))
        for i in t.traverse():
            if i not in (2, 5):
                self.assertEqual(t.get(i), 0.0)

    def test_sparse_and_dense_agree_on_values(self):
        dense = DenseTensor(8)
        sparse = SparseTensor(8)
        for t in (dense, sparse):
            t.put(2, 1.0)
            t.put(5, 4.0)
        self.assertEqual(list(sparse.traverse()), [2, 5])
        np.testing.assert_array_equal(dense.to_numpy(), sparse.to_numpy())

    def test_sparse_traverses_stored_entries(self):
        t = SparseTensor(8)
        t.put(5, 1.0)
        t.put(2, 3.0)
        self.assertEqual(list(t.traverse()), [2, 5])
        self.assertEqual(list(t), [2, 5])
        self.assertEqual(t.num_non_zero_elements(), 2)

    def test_sparse_zero_write_removes_entry(self):
        t = sparse_from(5, {1: 1.0, 3: 2.0})
        t.put(1, 0.0)
        self.assertEqual(list(t.traverse()), [3])

    def test_sparse_write_during_traversal(self):
        t = sparse_from(5, {0: 1.0, 2: 2.0, 4: 3.0})
        for i in t.traverse():
            t.put(i, 0.0)
        self.assertEqual(t.num_non_zero_elements(), 0)

    def test_zero_copy_keeps_storage_kind(self):
        self.assertIsInstance(SparseTensor(3).zero_copy(), SparseTensor)
        self.assertIsInstance(DenseTensor(3).zero_copy(), DenseTensor)
        self.assertTrue(SparseTensor(3).is_sparse)
        self.assertFalse(DenseTensor(3).is_sparse)


class TestIdentity(unittest.TestCase):
    def test_handles_are_unique(self):
        a = DenseTensor(2)
        b = DenseTensor(2)
        self.assertNotEqual(a.handle, b.handle)
        self.assertNotEqual(a.handle, a.copy().handle)

    def test_equal_values_are_not_equal_tensors(self):
        a = Tensor.from_numpy([1.0, 2.0])
        b = Tensor.from_numpy([1.0, 2.0])
        self.assertNotEqual(a, b)
        self.assertEqual(len({a, b}), 2)

    def test_copy_is_independent(self):
        a = Tensor.from_numpy([1.0, 2.0, 3.0])
        b = a.copy()
        b.put(0, 10.0)
        self.assertEqual(a.get(0), 1.0)
        a.put(1, 20.0)
        self.assertEqual(b.get(1), 2.0)

    def test_sparse_copy_is_independent(self):
        a = sparse_from(6, {1: 1.0, 4: 2.0})
        b = a.copy()
        self.assertIsInstance(b, SparseTensor)
        np.testing.assert_array_equal(b.to_numpy(), a.to_numpy())
        b.put(1, 0.0)
        b.put(3, 5.0)
        self.assertEqual(list(a.traverse()), [1, 4])
        self.assertEqual(a.get(3), 0.0)
        a.put(4, 7.0)
        self.assertEqual(b.get(4), 2.0)

    def test_matrix_copy_is_independent(self):
        for sparse in (False, True):
            m = Matrix.from_numpy([[1.0, 0.0], [0.0, 2.0]], sparse=sparse)
            c = m.copy()
            self.assertEqual(c.shape, (2, 2))
            self.assertEqual(c.is_sparse, sparse)
            np.testing.assert_array_equal(c.to_numpy(), m.to_numpy())
            c.put_element(0, 1, 3.0)
            self.assertEqual(m.get_element(0, 1), 0.0)
            m.put_element(1, 1, 9.0)
            self.assertEqual(c.get_element(1, 1), 2.0)


class TestArithmetic(unittest.TestCase):
    def test_add_subtract_multiply(self):
        a = Tensor.from_numpy([1.0, 2.0, 3.0])
        b = Tensor.from_numpy([4.0, 5.0, 6.0])
        np.testing.assert_allclose(a.add(b).to_numpy(), [5.0, 7.0, 9.0])
        np.testing.assert_allclose(b.subtract(a).to_numpy(), [3.0, 3.0, 3.0])
        np.testing.assert_allclose(a.multiply(b).to_numpy(), [4.0, 10.0, 18.0])
        np.testing.assert_allclose(a.multiply(2.0).to_numpy(), [2.0, 4.0, 6.0])
        np.testing.assert_allclose(a.add(1.0).to_numpy(), [2.0, 3.0, 4.0])
        # pure operations leave operands unchanged
        np.testing.assert_allclose(a.to_numpy(), [1.0, 2.0, 3.0])

    def test_in_place_variants(self):
        a = Tensor.from_numpy([1.0, 2.0])
        b = Tensor.from_numpy([3.0, 4.0])
        self.assertIs(a.self_add(b), a)
        np.testing.assert_allclose(a.to_numpy(), [4.0, 6.0])
        a.self_subtract(b).self_multiply(3.0)
        np.testing.assert_allclose(a.to_numpy(), [3.0, 6.0])

    def test_operators(self):
        a = Tensor.from_numpy([1.0, -2.0])
        np.testing.assert_allclose((a + 1.0).to_numpy(), [2.0, -1.0])
        np.testing.assert_allclose((2 * a).to_numpy(), [2.0, -4.0])
        np.testing.assert_allclose((-a).to_numpy(), [-1.0, 2.0])
        np.testing.assert_allclose((1.0 - a).to_numpy(), [0.0, 3.0])
        np.testing.assert_allclose((a - a).to_numpy(), [0.0, 0.0])

    def test_sparse_add_keeps_receiver_entries(self):
        a = sparse_from(4, {0: 1.0})
        b = sparse_from(4, {2: 3.0})
        res = a.add(b)
        np.testing.assert_allclose(res.to_numpy(), [1.0, 0.0, 3.0, 0.0])
        self.assertTrue(res.is_sparse)
        np.testing.assert_allclose(a.subtract(b).to_numpy(), [1.0, 0.0, -3.0, 0.0])

    def test_mixed_storage_add(self):
        dense = Tensor.from_numpy([1.0, 1.0, 1.0])
        sparse = sparse_from(3, {1: 2.0})
        np.testing.assert_allclose(dense.add(sparse).to_numpy(), [1.0, 3.0, 1.0])
        np.testing.assert_allclose(sparse.add(dense).to_numpy(), [1.0, 3.0, 1.0])

    def test_size_mismatch_raises(self):
        a = DenseTensor(3)
        b = DenseTensor(4)
        for op in (a.add, a.subtract, a.multiply, a.dot, a.self_add):
            with self.assertRaises(DimensionMismatchError):
                op(b)

    def test_mismatch_message_names_both_operands(self):
        with self.assertRaises(DimensionMismatchError) as ctx:
            DenseTensor(3).add(SparseTensor(4))
        self.assertIn("DenseTensor (3)", str(ctx.exception))
        self.assertIn("SparseTensor (4)", str(ctx.exception))

    def test_sqrt_and_inverse(self):
        a = Tensor.from_numpy([-4.0, 9.0, 0.0])
        np.testing.assert_allclose(a.sqrt().to_numpy(), [2.0, 3.0, 0.0])
        np.testing.assert_allclose(
            Tensor.from_numpy([2.0, 0.0, -4.0]).inverse().to_numpy(), [0.5, 0.0, -0.25]
        )


class TestReductions(unittest.TestCase):
    def test_dot_is_symmetric(self):
        a = Tensor.from_numpy([1.0, 2.0, 3.0])
        b = Tensor.from_numpy([4.0, 5.0, 6.0])
        self.assertEqual(a.dot(b), 32.0)
        self.assertEqual(b.dot(a), 32.0)
        self.assertEqual(a.dot(b, b), 1 * 16 + 2 * 25 + 3 * 36)

    def test_sparse_dense_dot(self):
        a = sparse_from(3, {1: 2.0})
        b = Tensor.from_numpy([4.0, 5.0, 6.0])
        self.assertEqual(a.dot(b), 10.0)
        self.assertEqual(b.dot(a), 10.0)

    def test_norm_sum_max_min(self):
        a = Tensor.from_numpy([3.0, -4.0])
        self.assertAlmostEqual(a.norm(), 5.0)
        self.assertEqual(a.sum(), -1.0)
        self.assertEqual(a.max(), 3.0)
        self.assertEqual(a.min(), -4.0)

    def test_to_double(self):
        self.assertEqual(Tensor.from_double(2.5).to_double(), 2.5)
        with self.assertRaises(DimensionMismatchError):
            DenseTensor(2).to_double()


class TestNormalization(unittest.TestCase):
    def test_normalized(self):
        a = Tensor.from_numpy([3.0, 4.0])
        np.testing.assert_allclose(a.normalized().to_numpy(), [0.6, 0.8])
        self.assertAlmostEqual(a.set_to_normalized().norm(), 1.0)

    def test_zero_norm_returns_zeros(self):
        a = DenseTensor(3)
        res = a.normalized()
        self.assertIsNot(res, a)
        np.testing.assert_array_equal(res.to_numpy(), [0.0, 0.0, 0.0])
        np.testing.assert_array_equal(a.set_to_normalized().to_numpy(), [0.0, 0.0, 0.0])

    def test_probability(self):
        a = Tensor.from_numpy([1.0, 3.0])
        np.testing.assert_allclose(a.to_probability().to_numpy(), [0.25, 0.75])
        np.testing.assert_array_equal(DenseTensor(2).to_probability().to_numpy(), [0.0, 0.0])

    def test_fillers(self):
        a = DenseTensor(4)
        np.testing.assert_allclose(a.set_to_ones().to_numpy(), [1.0] * 4)
        np.testing.assert_allclose(a.set_to_uniform().to_numpy(), [0.25] * 4)
        np.testing.assert_allclose(a.set_to_zero().to_numpy(), [0.0] * 4)
        values = a.set_to_random().to_numpy()
        self.assertTrue(np.all((values >= 0.0) & (values < 1.0)))


class TestFiniteness(unittest.TestCase):
    def test_assert_finite_passes_for_finite_values(self):
        Tensor.from_numpy([1.0, -2.0]).assert_finite()

    def test_assert_finite_detects_infinity(self):
        a = DenseTensor(3)
        a.put(2, math.inf)
        with self.assertRaises(NonFiniteValueError) as ctx:
            a.assert_finite()
        self.assertEqual(ctx.exception.pos, 2)


class TestConstructors(unittest.TestCase):
    def test_from_range(self):
        np.testing.assert_array_equal(Tensor.from_range(2, 5).to_numpy(), [2.0, 3.0, 4.0])
        np.testing.assert_array_equal(Tensor.from_range(3).to_numpy(), [0.0, 1.0, 2.0])

    def test_from_numpy_sparse(self):
        t = Tensor.from_numpy([0.0, 1.5, 0.0], sparse=True)
        self.assertIsInstance(t, SparseTensor)
        self.assertEqual(list(t.traverse()), [1])

    def test_from_numpy_rejects_matrix(self):
        with self.assertRaises(DimensionMismatchError):
            Tensor.from_numpy(np.zeros((2, 2)))

    def test_str_and_describe(self):
        t = Tensor.from_numpy([1.0, 2.0])
        self.assertEqual(str(t), "1.0,2.0")
        self.assertEqual(t.describe(), "DenseTensor (2)")


if __name__ == "__main__":
    unittest.main()
