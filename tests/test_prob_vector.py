import unittest

import torch

try:
    from ._path import add_project_root_to_path
except ImportError:
    from _path import add_project_root_to_path

add_project_root_to_path()

from loopybayes import LogProbVector


class TestLogProbVector(unittest.TestCase):
    def test_uniform(self):
        vec = LogProbVector.uniform(4)
        self.assertEqual(len(vec), 4)
        self.assertTrue(torch.allclose(vec.as_probabilities(), torch.full((4,), 0.25, dtype=torch.float64)))

    def test_deterministic(self):
        vec = LogProbVector.deterministic(3, 1)
        self.assertTrue(torch.equal(vec.as_probabilities(), torch.tensor([0.0, 1.0, 0.0], dtype=torch.float64)))

    def test_deterministic_out_of_range_has_no_mass(self):
        vec = LogProbVector.deterministic(3, 5)
        self.assertTrue(torch.equal(vec.as_probabilities(), torch.zeros(3, dtype=torch.float64)))

    def test_as_probabilities_is_shift_invariant(self):
        vec = LogProbVector.from_log_probabilities([1000.0, 1000.0 + torch.log(torch.tensor(3.0)).item()])
        probs = vec.as_probabilities()
        self.assertTrue(torch.allclose(probs, torch.tensor([0.25, 0.75], dtype=torch.float64)))
        self.assertAlmostEqual(float(probs.sum()), 1.0, places=12)

    def test_renormalize(self):
        vec = LogProbVector.from_log_probabilities([2.0, 3.0, -1.0]).renormalize()
        self.assertAlmostEqual(vec.log_normalizer(), 0.0, places=12)

    def test_prod(self):
        a = LogProbVector.from_log_probabilities(torch.log(torch.tensor([0.5, 0.5], dtype=torch.float64)))
        b = LogProbVector.from_log_probabilities(torch.log(torch.tensor([0.2, 0.6], dtype=torch.float64)))
        probs = a.prod(b).as_probabilities()
        self.assertTrue(torch.allclose(probs, torch.tensor([0.25, 0.75], dtype=torch.float64)))

    def test_rejects_matrix(self):
        with self.assertRaises(ValueError):
            LogProbVector(torch.zeros(2, 2))

    def test_repr(self):
        self.assertIn("LogProbVector", repr(LogProbVector.uniform(2)))


if __name__ == "__main__":
    unittest.main()
