#!/usr/bin/env python3
"""
Tests for the k-mer set distance.

The default ``legacy`` mode reports ``1 - symmetric_difference / union``,
which equals intersection / union: identical sets give 1 and disjoint sets
give 0. The ``jaccard`` mode is the textbook distance: identical sets give 0
and disjoint sets give 1. The partial-overlap case below tells them apart.
"""

import unittest
import sys
from collections import Counter
from pathlib import Path
from unittest.mock import MagicMock

# Add the package to the path for testing
sys.path.insert(0, str(Path(__file__).parent))

from genomedist.counter import count
from genomedist.errors import DivisionUndefined
from genomedist.jaccard import (
    JACCARD,
    LEGACY,
    KmerSetComparison,
    compare,
    distance,
    self_distance,
)


class TestCompare(unittest.TestCase):

    def test_partial_overlap(self):
        a = {"ACGT": 2, "CGTA": 1, "GTAC": 1, "TACG": 1}
        b = {"ACGT": 1, "CGTA": 1, "GTAC": 1, "TACG": 1, "ACGA": 1}
        self.assertEqual(
            compare(a, b),
            KmerSetComparison(symmetric_difference=1, intersection=4, union=5),
        )

    def test_empty_sets(self):
        self.assertEqual(compare({}, {}), KmerSetComparison(0, 0, 0))


class TestDistance(unittest.TestCase):
    """Test both distance formulas on hand-computed cases."""

    def setUp(self):
        self.sample1 = count(["ACGTACGT"], k=4, min_coverage=1)
        self.sample2 = count(["ACGTACGA"], k=4, min_coverage=1)

    def test_reference_scenario_sets(self):
        self.assertEqual(set(self.sample1), {"ACGT", "CGTA", "GTAC", "TACG"})
        self.assertEqual(set(self.sample2), {"ACGT", "CGTA", "GTAC", "TACG", "ACGA"})

    def test_reference_scenario_legacy(self):
        # 1 - (1 / 5)
        self.assertAlmostEqual(distance(self.sample1, self.sample2), 0.8)
        self.assertAlmostEqual(distance(self.sample1, self.sample2, mode=LEGACY), 0.8)

    def test_reference_scenario_jaccard(self):
        # 1 - (4 / 5)
        self.assertAlmostEqual(distance(self.sample1, self.sample2, mode=JACCARD), 0.2)

    def test_identical_sets(self):
        self.assertEqual(distance(self.sample1, self.sample1), 1.0)
        self.assertEqual(distance(self.sample1, self.sample1, mode=JACCARD), 0.0)
        self.assertEqual(self_distance(LEGACY), 1.0)
        self.assertEqual(self_distance(JACCARD), 0.0)

    def test_disjoint_sets(self):
        a = {"AAAA": 3, "CCCC": 2}
        b = {"GGGG": 2, "TTTT": 4, "ACAC": 2}
        self.assertEqual(distance(a, b), 0.0)
        self.assertEqual(distance(a, b, mode=JACCARD), 1.0)

    def test_symmetry(self):
        for mode in (LEGACY, JACCARD):
            self.assertEqual(
                distance(self.sample1, self.sample2, mode=mode),
                distance(self.sample2, self.sample1, mode=mode),
            )

    def test_counts_ignored(self):
        a = Counter({"ACGT": 100, "CGTA": 2})
        b = Counter({"ACGT": 2, "GGGG": 50})
        self.assertAlmostEqual(distance(a, b), 1 - 2 / 3)

    def test_one_empty_set(self):
        empty = count([], k=4, min_coverage=1)
        self.assertEqual(distance(empty, self.sample1), 0.0)
        self.assertEqual(distance(self.sample1, empty), 0.0)
        self.assertEqual(distance(empty, self.sample1, mode=JACCARD), 1.0)

    def test_both_empty(self):
        with self.assertRaises(DivisionUndefined) as ctx:
            distance({}, {}, sample_a="s1.fastq", sample_b="s2.fastq")
        self.assertEqual(ctx.exception.sample_a, "s1.fastq")
        self.assertEqual(ctx.exception.sample_b, "s2.fastq")
        self.assertIn("s1.fastq", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ZeroDivisionError)

    def test_both_empty_any_mode(self):
        with self.assertRaises(DivisionUndefined):
            distance({}, {}, mode=JACCARD)

    def test_inputs_not_mutated(self):
        a = dict(self.sample1)
        b = dict(self.sample2)
        distance(self.sample1, self.sample2)
        self.assertEqual(dict(self.sample1), a)
        self.assertEqual(dict(self.sample2), b)

    def test_unknown_mode(self):
        with self.assertRaises(ValueError):
            distance(self.sample1, self.sample2, mode="mummer")
        with self.assertRaises(ValueError):
            self_distance("cosine")

    def test_reports_formula(self):
        progress = MagicMock()
        value = distance(self.sample1, self.sample2, progress=progress)
        progress.assert_called_once_with(f"{value}=1-(1 / 5)")


if __name__ == "__main__":
    unittest.main()
