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

import math
import unittest

from hashstat.core import DegenerateInputError, RangeError, UsageError
from hashstat.provider import BlockDataProvider, ChainFixture
from hashstat.report import *

# (mediantime, difficulty) for heights 0 through 9
SAMPLES = [(1000, 1.0), (1600, 1.0), (2100, 2.0), (2900, 2.0), (3500, 3.0),
           (4000, 3.0), (4700, 4.0), (5300, 4.0), (5800, 5.0), (6500, 5.0)]


class CountingProvider(BlockDataProvider):
    """Records every query made of the wrapped provider"""

    def __init__(self, provider):
        self.provider = provider
        self.calls = []

    def get_chain_tip_height(self):
        self.calls.append(('tip',))
        return self.provider.get_chain_tip_height()

    def get_header_by_height(self, height):
        self.calls.append(('height', height))
        return self.provider.get_header_by_height(height)

    def get_header_by_hash(self, block_hash):
        self.calls.append(('hash', block_hash))
        return self.provider.get_header_by_hash(block_hash)


class Test_format_duration(unittest.TestCase):
    def test(self):
        def T(seconds, expected):
            self.assertEqual(format_duration(seconds), expected)

        T(0, '0s')
        T(59, '59s')
        T(60, '1m:0s')
        T(3600, '1h:0m:0s')
        T(86400, '1d:0h:0m:0s')
        T(90061, '1d:1h:1m:1s')
        T(83525, '23h:12m:5s')
        T(2*86400 + 5, '2d:0h:0m:5s')
        T(61.9, '1m:1s')
        T(-90, '-1m:30s')


class Test_format_number(unittest.TestCase):
    def test(self):
        self.assertEqual(format_number(0), '0.0')
        self.assertEqual(format_number(999.94), '999.9')
        self.assertEqual(format_number(1234567.89), '1,234,567.9')
        self.assertEqual(format_number(83148355189239.77), '83,148,355,189,239.8')


class Test_format_hashrate(unittest.TestCase):
    def test(self):
        def T(hps, expected):
            self.assertEqual(format_hashrate(hps), expected)

        T(0, '0.0 H/s')
        T(999, '999.0 H/s')
        T(1000, '1.0 kH/s')
        T(1500, '1.5 kH/s')
        T(2.5e9, '2.5 GH/s')
        T(594.5e18, '594.5 EH/s')

    def test_saturates(self):
        self.assertEqual(format_hashrate(1e21), '1000.0 EH/s')
        self.assertEqual(format_hashrate(3.2e24), '3200000.0 EH/s')


class Test_build_report(unittest.TestCase):
    def test_fixture_chain(self):
        r = build_report(ChainFixture.from_samples(SAMPLES), 1,
                         blocks_per_day=6, adjustment_interval=2016)

        self.assertEqual(r.height, 9)
        self.assertEqual(r.past_height, 3)
        self.assertEqual(r.blocks, 6)
        self.assertEqual(r.next_adjustment, 2006)
        self.assertEqual(r.expected_time, 86400)
        self.assertEqual(r.actual_time, 6500 - 2900)
        self.assertEqual(r.average_block_time, 600.0)
        self.assertEqual(r.median_block_time, 600)

        expected_diff = 26.0 / 7
        self.assertTrue(math.isclose(r.average_difficulty, expected_diff, rel_tol=1e-6))
        self.assertTrue(math.isclose(r.stddev_block_time, math.sqrt(8000), rel_tol=1e-6))
        self.assertTrue(math.isclose(r.hashrate, expected_diff * 2**32 / 600, rel_tol=1e-6))

    def test_render(self):
        r = build_report(ChainFixture.from_samples(SAMPLES), 1,
                         blocks_per_day=6, adjustment_interval=2016)
        self.assertEqual(r.render(),
                         'Days: 1\n'
                         'Block Height: 9\n'
                         'Blocks: 6\n'
                         'Next Diff Adjustment In: 2006 Blocks\n'
                         'Expected Time: 1d:0h:0m:0s\n'
                         'Actual Time:   1h:0m:0s\n'
                         'Average Block Time: 10.00m\n'
                         'Median Block Time: 10.00m\n'
                         'Std Dev: 1.49m\n'
                         'Average Difficulty: 3.7\n'
                         'Estimated Hashrate: 26.6 MH/s\n')

    def test_immutable(self):
        r = build_report(ChainFixture.from_samples(SAMPLES), 1, blocks_per_day=6)
        with self.assertRaises(AttributeError):
            r.hashrate = 0

    def test_range_rejected_without_further_calls(self):
        provider = CountingProvider(ChainFixture.from_samples(SAMPLES))
        with self.assertRaises(RangeError):
            build_report(provider, 1)
        self.assertEqual(provider.calls, [('tip',)])

    def test_huge_window_rejected_without_further_calls(self):
        provider = CountingProvider(ChainFixture.from_samples(SAMPLES))
        with self.assertRaises(RangeError):
            build_report(provider, 1e307)
        self.assertEqual(provider.calls, [('tip',)])

    def test_whole_chain(self):
        r = build_report(ChainFixture.from_samples(SAMPLES), 1, blocks_per_day=9)
        self.assertEqual(r.past_height, 0)
        self.assertEqual(r.average_difficulty, 3.0)

    def test_zero_blocks(self):
        with self.assertRaises(DegenerateInputError):
            build_report(ChainFixture.from_samples(SAMPLES), 0)

    def test_time_reversed(self):
        samples = [(1000, 1.0), (900, 1.0), (800, 1.0)]
        with self.assertRaises(DegenerateInputError):
            build_report(ChainFixture.from_samples(samples), 1, blocks_per_day=2)

    def test_bad_days(self):
        for days in (-1, float('nan'), float('inf')):
            with self.assertRaises(UsageError):
                build_report(ChainFixture.from_samples(SAMPLES), days)
