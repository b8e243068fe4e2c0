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

"""Hashrate reports: gathering the statistics and rendering them"""

import collections
import logging
import math

import hashstat
from hashstat.chain import walk_intervals
from hashstat.core import RangeError, UsageError
from hashstat.stats import (average_block_time, blocks_for_days,
                            estimate_hashrate, mean_difficulty, median,
                            next_adjustment, sample_standard_deviation)

log = logging.getLogger(__name__)

HASHRATE_UNITS = ('H/s', 'kH/s', 'MH/s', 'GH/s', 'TH/s', 'PH/s', 'EH/s')


def format_duration(seconds):
    """Format seconds as d:h:m:s, leaving out leading zero units

    >>> format_duration(90061)
    '1d:1h:1m:1s'
    >>> format_duration(59)
    '59s'
    """
    seconds = int(seconds)
    if seconds < 0:
        return '-' + format_duration(-seconds)

    days, seconds = divmod(seconds, 86400)
    hours, seconds = divmod(seconds, 3600)
    minutes, seconds = divmod(seconds, 60)

    r = ''
    if days > 0:
        r += '%dd:' % days
    if days > 0 or hours > 0:
        r += '%dh:' % hours
    if days > 0 or hours > 0 or minutes > 0:
        r += '%dm:' % minutes
    r += '%ds' % seconds
    return r


def format_number(value):
    """Format value with one decimal and thousands separators"""
    return '{:,.1f}'.format(value)


def format_hashrate(hps):
    """Format hashes per second in the largest unit that keeps it below 1000

    Saturates at EH/s.
    """
    unit = 0
    while hps >= 1000.0 and unit < len(HASHRATE_UNITS) - 1:
        hps /= 1000.0
        unit += 1
    return '%.1f %s' % (hps, HASHRATE_UNITS[unit])


_ReportBase = collections.namedtuple('_ReportBase', [
    'days',
    'height',
    'past_height',
    'blocks',
    'next_adjustment',
    'expected_time',
    'actual_time',
    'average_block_time',
    'median_block_time',
    'stddev_block_time',
    'average_difficulty',
    'hashrate',
])

class Report(_ReportBase):
    """Statistics for one lookback window

    Times are in seconds.
    """
    __slots__ = ()

    def render(self):
        return format_report(self)

    def __str__(self):
        return self.render()


def format_report(report):
    """Render report as the lines printed by the command line tool"""
    lines = [
        'Days: %g' % report.days,
        'Block Height: %d' % report.height,
        'Blocks: %d' % report.blocks,
        'Next Diff Adjustment In: %d Blocks' % report.next_adjustment,
        'Expected Time: %s' % format_duration(report.expected_time),
        'Actual Time:   %s' % format_duration(report.actual_time),
        'Average Block Time: %.2fm' % (report.average_block_time / 60.0),
        'Median Block Time: %.2fm' % (report.median_block_time / 60.0),
        'Std Dev: %.2fm' % (report.stddev_block_time / 60.0),
        'Average Difficulty: %s' % format_number(report.average_difficulty),
        'Estimated Hashrate: %s' % format_hashrate(report.hashrate),
    ]
    return '\n'.join(lines) + '\n'


def build_report(provider, days, blocks_per_day=None, adjustment_interval=None):
    """Measure the last days worth of blocks on provider's chain

    The window spans floor(days * blocks_per_day) blocks back from the tip.
    Average block time comes from the median times at either end of the
    window; median and standard deviation from the block-to-block intervals.

    Raises UsageError for a negative or non-finite days, RangeError if the
    window reaches back past the genesis block, and DegenerateInputError if
    the window is empty or its times do not advance.
    """
    if blocks_per_day is None:
        blocks_per_day = hashstat.params.BLOCKS_PER_DAY
    if adjustment_interval is None:
        adjustment_interval = hashstat.params.DIFFICULTY_ADJUSTMENT_INTERVAL

    if not math.isfinite(days) or days < 0:
        raise UsageError('days must be a non-negative number; got %r' % days)

    height = provider.get_chain_tip_height()

    offset = blocks_for_days(days, blocks_per_day)
    past_height = height - offset
    if past_height < 0:
        raise RangeError('Requested history exceeds blockchain height '
                         '(%d blocks requested, tip is at %d)' % (offset, height))

    head = provider.get_header_by_height(height)
    past = provider.get_header_by_height(past_height)
    time_delta = head.mediantime - past.mediantime
    log.debug('window %d..%d spans %d seconds', past_height, height, time_delta)

    walk = walk_intervals(provider, past_height, height)
    if walk.blocks_walked < walk.difficulty_count:
        log.debug('walk ended after %d of %d blocks',
                  walk.blocks_walked, walk.difficulty_count)

    avg_diff = mean_difficulty(walk)
    avg_block_time = average_block_time(time_delta, offset)
    hashrate = estimate_hashrate(avg_diff, avg_block_time)

    return Report(days=days,
                  height=height,
                  past_height=past_height,
                  blocks=offset,
                  next_adjustment=next_adjustment(height, adjustment_interval),
                  expected_time=int(days * 86400),
                  actual_time=time_delta,
                  average_block_time=avg_block_time,
                  median_block_time=median(walk.intervals),
                  stddev_block_time=sample_standard_deviation(walk.intervals),
                  average_difficulty=avg_diff,
                  hashrate=hashrate)
