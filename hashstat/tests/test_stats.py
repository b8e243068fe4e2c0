# Copyright (C) 2013-2024 The python-hashstat developers
#
# This file is part of python-hashstat.
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of python-hashstat, including this file, may be copied, modified,
# propagated, or distributed except according to the terms contained in the
# LICENSE file.

import itertools
import unittest

from hashstat.core import DegenerateInputError, RangeError
from hashstat.stats import *


class Test_median(unittest.TestCase):
    def test(self):
        self.assertEqual(median([10]), 10)
        self.assertEqual(median([10, 20]), 15)
        self.assertEqual(median([]), 0)
        self.assertEqual(median([3, 1, 2]), 2)
        self.assertEqual(median([600, 500, 700, 600, 500, 700]), 600)

    def test_permutation_invariant(self):
        values = [620, 12, 1043, 12, 587]
        for p in itertools.permutations(values):
            self.assertEqual(median(list(p)), 587)

    def test_input_not_mutated(self):
        values = [3, 1, 2]
        median(values)
        self.assertEqual(values, [3, 1, 2])


class Test_sample_standard_deviation(unittest.TestCase):
    def test_reference(self):
        self.assertAlmostEqual(sample_standard_deviation([2, 4, 4, 4, 5, 5, 7, 9]),
                               2.138089935299395)

    def test_fewer_than_two(self):
        self.assertEqual(sample_standard_deviation([]), 0)
        self.assertEqual(sample_standard_deviation([42]), 0)
        self.assertEqual(sample_standard_deviation([-600]), 0)

    def test_constant(self):
        self.assertEqual(sample_standard_deviation([600] * 100), 0.0)
        self.assertEqual(sample_standard_deviation([1700000000] * 7), 0.0)


class Test_mean_difficulty(unittest.TestCase):
    def test(self):
        self.assertEqual(mean(26.0, 7), 26.0 / 7)
        with self.assertRaises(DegenerateInputError):
            mean(1.0, 0)


class Test_estimate_hashrate(unittest.TestCase):
    def test(self):
        self.assertEqual(estimate_hashrate(1, 2**32), 1.0)
        self.assertEqual(estimate_hashrate(1, 600), 2**32 / 600)

    def test_linear(self):
        D, T = 83148355189239.77, 581.25
        self.assertAlmostEqual(estimate_hashrate(2*D, T) / estimate_hashrate(D, T), 2.0)
        self.assertAlmostEqual(estimate_hashrate(D, 2*T) / estimate_hashrate(D, T), 0.5)

    def test_degenerate_time(self):
        for T in (0, 0.0, -600, float('inf'), float('nan')):
            with self.assertRaises(DegenerateInputError):
                estimate_hashrate(1.0, T)

    def test_average_block_time(self):
        self.assertEqual(average_block_time(86400, 144), 600)
        with self.assertRaises(DegenerateInputError):
            average_block_time(0, 0)


class Test_next_adjustment(unittest.TestCase):
    def test(self):
        self.assertEqual(next_adjustment(0), 2015)
        self.assertEqual(next_adjustment(2014), 1)
        self.assertEqual(next_adjustment(2015), 2016)
        self.assertEqual(next_adjustment(850000), 2016 - 850001 % 2016)

    def test_periodic(self):
        for h in range(0, 3*2016, 7):
            n = next_adjustment(h)
            self.assertEqual(n, next_adjustment(h + 2016))
            self.assertTrue(1 <= n <= 2016)

    def test_interval(self):
        self.assertEqual(next_adjustment(9, 10), 10)
        self.assertEqual(next_adjustment(9, 2016), 2006)


class Test_blocks_for_days(unittest.TestCase):
    def test(self):
        self.assertEqual(blocks_for_days(1), 144)
        self.assertEqual(blocks_for_days(0.5), 72)
        self.assertEqual(blocks_for_days(0.01), 1)
        self.assertEqual(blocks_for_days(0), 0)
        self.assertEqual(blocks_for_days(1, 6), 6)

    def test_too_long(self):
        with self.assertRaises(RangeError):
            blocks_for_days(1e307)
