# Copyright (C) 2012-2024 The python-hashstat developers
#
# This file is part of python-hashstat.
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of python-hashstat, including this file, may be copied, modified,
# propagated, or distributed except according to the terms contained in the
# LICENSE file.

"""Block time statistics and hashrate estimation

Everything here is a pure function of its arguments.
"""

import math

import hashstat
from hashstat.core import DegenerateInputError, RangeError

# Expected number of hashes to find a block at difficulty 1
HASHES_PER_DIFFICULTY = 2**32


def median(values):
    """Median of values, or 0 if there are none"""
    s = sorted(values)
    n = len(s)
    if n == 0:
        return 0
    if n % 2 == 0:
        return (s[n//2 - 1] + s[n//2]) / 2.0
    return s[n//2]


def sample_standard_deviation(values):
    """Standard deviation with Bessel's correction

    Returns 0 for fewer than two values, where it is undefined.

    Accumulates the sum and sum of squares in double precision; with values
    whose spread is tiny compared to their magnitude the result loses
    precision to cancellation.
    """
    n = len(values)
    if n < 2:
        return 0.0

    total = 0.0
    total_sq = 0.0
    for v in values:
        total += v
        total_sq += float(v) * v

    mean = total / n
    variance = (total_sq - n * mean * mean) / (n - 1)
    # rounding can leave identical values a hair below zero
    return math.sqrt(max(variance, 0.0))


def mean(total, count):
    if count <= 0:
        raise DegenerateInputError('mean of %d samples' % count)
    return total / count


def mean_difficulty(walk):
    """Average difficulty over the full range of a ChainWalk"""
    return mean(walk.difficulty_total, walk.difficulty_count)


def average_block_time(time_delta, blocks):
    """Seconds per block over a window of blocks spanning time_delta seconds"""
    if blocks <= 0:
        raise DegenerateInputError('degenerate time window: %d blocks' % blocks)
    return time_delta / blocks


def estimate_hashrate(difficulty, block_time):
    """Estimate network hashes per second

    At difficulty D a block takes D * 2**32 hashes on average, so dividing by
    the observed seconds per block gives hashes per second.
    """
    if not math.isfinite(block_time) or block_time <= 0:
        raise DegenerateInputError('degenerate time window: average block time %r' % block_time)
    if not math.isfinite(difficulty) or difficulty < 0:
        raise DegenerateInputError('bad average difficulty %r' % difficulty)
    return difficulty * HASHES_PER_DIFFICULTY / block_time


def next_adjustment(height, interval=None):
    """Blocks remaining after height until the next difficulty adjustment

    Always in [1, interval].
    """
    if interval is None:
        interval = hashstat.params.DIFFICULTY_ADJUSTMENT_INTERVAL
    return interval - ((height + 1) % interval)


def blocks_for_days(days, blocks_per_day=None):
    """Number of blocks expected in days, rounded down

    Raises RangeError if the count is too large to represent.
    """
    if blocks_per_day is None:
        blocks_per_day = hashstat.params.BLOCKS_PER_DAY
    blocks = days * blocks_per_day
    if not math.isfinite(blocks):
        raise RangeError('%r days is longer than any chain' % days)
    return int(math.floor(blocks))
