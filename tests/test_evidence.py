import unittest

import torch

try:
    from ._path import add_project_root_to_path
except ImportError:
    from _path import add_project_root_to_path

add_project_root_to_path()

from loopybayes import Evidence, OutOfRange, UnknownNode


class TestEvidence(unittest.TestCase):
    def setUp(self):
        self.evidence = Evidence([3, 2])

    def test_set_pairs(self):
        self.evidence.set([(0, 2), (1, 0)])
        self.assertEqual(self.evidence.as_dict(), {0: 2, 1: 0})
        self.assertIn(0, self.evidence)
        self.assertEqual(len(self.evidence), 2)

    def test_set_mapping(self):
        self.evidence.set({1: 1})
        self.assertEqual(self.evidence.value(1), 1)
        self.assertNotIn(0, self.evidence)

    def test_set_replaces_previous(self):
        self.evidence.set([(0, 1)])
        self.evidence.set([(1, 1)])
        self.assertEqual(self.evidence.as_dict(), {1: 1})
        self.evidence.set([])
        self.assertEqual(len(self.evidence), 0)

    def test_out_of_range(self):
        with self.assertRaises(OutOfRange):
            self.evidence.set([(1, 2)])
        with self.assertRaises(OutOfRange):
            self.evidence.set([(0, -1)])
        with self.assertRaises(OutOfRange):
            self.evidence.set([(0, 1.5)])
        self.assertTrue(issubclass(OutOfRange, IndexError))

    def test_unknown_node(self):
        with self.assertRaises(UnknownNode):
            self.evidence.set([(2, 0)])

    def test_invalid_evidence_keeps_previous(self):
        self.evidence.set([(0, 1)])
        with self.assertRaises(OutOfRange):
            self.evidence.set([(1, 0), (0, 3)])
        self.assertEqual(self.evidence.as_dict(), {0: 1})

    def test_delta(self):
        self.evidence.set([(0, 1)])
        delta = self.evidence.delta(0)
        self.assertEqual(delta.dtype, torch.float64)
        self.assertEqual(float(delta[1]), 0.0)
        self.assertEqual(float(delta[0]), float("-inf"))
        self.assertEqual(float(delta[2]), float("-inf"))

    def test_clear(self):
        self.evidence.set([(0, 1)])
        self.evidence.clear()
        self.assertEqual(self.evidence.as_dict(), {})


if __name__ == "__main__":
    unittest.main()
