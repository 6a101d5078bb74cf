import threading
import unittest

import numpy as np

from src.nodegrad.domain._errors import HyperparameterRangeError
from src.nodegrad.domain._optimizers import IOptimizer
from src.nodegrad.infrastructure.optimizers._adam import Adam
from src.nodegrad.infrastructure.optimizers._batch import BatchOptimizer
from src.nodegrad.infrastructure.optimizers._sgd import SGD
from src.nodegrad.infrastructure.tensor._tensor import Tensor


class TestSGD(unittest.TestCase):
    def test_update(self):
        p = Tensor.from_numpy([1.0, 2.0, 3.0])
        SGD(0.5).update(p, Tensor.from_numpy([0.1, -0.2, 0.3]))
        np.testing.assert_allclose(p.to_numpy(), [0.95, 2.1, 2.85])

    def test_weight_decay(self):
        p0 = np.array([1.0, -2.0])
        g0 = np.array([0.5, 0.25])
        p = Tensor.from_numpy(p0)
        SGD(0.1, weight_decay=0.01).update(p, Tensor.from_numpy(g0))
        np.testing.assert_allclose(p.to_numpy(), p0 - 0.1 * (g0 + 0.01 * p0))

    def test_invalid_hyperparameters(self):
        with self.assertRaises(HyperparameterRangeError):
            SGD(0.0)
        with self.assertRaises(ValueError):
            SGD(0.1, weight_decay=-1.0)


class TestBatchOptimizer(unittest.TestCase):
    def test_applies_mean_gradient(self):
        p = Tensor.from_numpy([0.0, 0.0])
        batch = BatchOptimizer(SGD(1.0))
        batch.update(p, Tensor.from_numpy([1.0, 1.0]))
        batch.update(p, Tensor.from_numpy([3.0, -1.0]))
        # nothing applied until update_all
        np.testing.assert_allclose(p.to_numpy(), [0.0, 0.0])
        self.assertEqual(batch.pending(), 1)
        batch.update_all()
        np.testing.assert_allclose(p.to_numpy(), [-2.0, 0.0])
        self.assertEqual(batch.pending(), 0)

    def test_does_not_modify_gradients(self):
        p = Tensor.from_numpy([0.0])
        g = Tensor.from_numpy([2.0])
        batch = BatchOptimizer(SGD(1.0))
        batch.update(p, g)
        batch.update(p, g)
        batch.update_all()
        np.testing.assert_allclose(g.to_numpy(), [2.0])

    def test_concurrent_accumulation(self):
        params = [Tensor.from_numpy([0.0, 0.0]) for _ in range(3)]
        batch = BatchOptimizer(SGD(1.0))

        def work(scale):
            for p in params:
                batch.update(p, Tensor.from_numpy([scale, 2 * scale]))

        threads = [threading.Thread(target=work, args=(float(i),)) for i in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(batch.pending(), 3)
        batch.update_all()
        for p in params:
            np.testing.assert_allclose(p.to_numpy(), [-4.5, -9.0])

    def test_reset_discards_pending_and_base_state(self):
        p = Tensor.from_numpy([0.0])
        base = Adam(0.01)
        batch = BatchOptimizer(base)
        batch.update(p, Tensor.from_numpy([1.0]))
        batch.update_all()
        batch.update(p, Tensor.from_numpy([1.0]))
        batch.reset()
        self.assertEqual(batch.pending(), 0)
        with self.assertRaises(KeyError):
            base.state(p)


class TestOptimizerProtocol(unittest.TestCase):
    def test_conformance(self):
        for opt in (SGD(0.1), Adam(), BatchOptimizer(SGD(0.1))):
            self.assertIsInstance(opt, IOptimizer)


if __name__ == "__main__":
    unittest.main()
