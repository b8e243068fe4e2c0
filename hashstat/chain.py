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

"""Walking a range of the best chain"""

import logging

from hashstat.core import RangeError

log = logging.getLogger(__name__)


class ChainWalk(object):
    """Difficulty samples and block intervals collected over a height range

    difficulty_count is always the size of the requested range, even when the
    walk stopped early at the tip; intervals only covers the consecutive pairs
    actually visited.
    """
    __slots__ = ['start', 'end', 'difficulty_total', 'difficulty_count',
                 'intervals', 'blocks_walked']

    def __init__(self, start, end, difficulty_total, intervals, blocks_walked):
        self.start = start
        self.end = end
        self.difficulty_total = difficulty_total
        self.difficulty_count = end - start + 1
        self.intervals = intervals
        self.blocks_walked = blocks_walked

    def __repr__(self):
        return '%s(%d, %d, %r, <%d intervals>, %d)' % \
                (self.__class__.__name__, self.start, self.end,
                 self.difficulty_total, len(self.intervals), self.blocks_walked)


def check_range(start, end):
    """Raise RangeError unless 0 <= start <= end"""
    if start < 0:
        raise RangeError('start height %d is below the genesis block' % start)
    if start > end:
        raise RangeError('invalid range: start height %d is above end height %d' % (start, end))


def iter_headers(provider, start, end):
    """Yield the headers from height start to end in chain order

    Follows nextblockhash from the header at start, so each header after the
    first costs one hash lookup. Stops early, without error, at a header that
    has no successor.
    """
    check_range(start, end)

    header = provider.get_header_by_height(start)
    for _ in range(start, end):
        yield header
        if header.nextblockhash is None:
            log.debug('walk stopped at tip, height %d', header.height)
            return
        header = provider.get_header_by_hash(header.nextblockhash)
    yield header


def walk_intervals(provider, start, end):
    """Sum difficulty and collect mediantime deltas from start to end

    Returns a ChainWalk.
    """
    check_range(start, end)
    log.debug('walking blocks %d to %d', start, end)

    total = 0.0
    intervals = []
    prev = None
    n = 0
    for header in iter_headers(provider, start, end):
        total += header.difficulty
        if prev is not None:
            intervals.append(header.mediantime - prev.mediantime)
        prev = header
        n += 1

    return ChainWalk(start, end, total, intervals, n)
