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

"""Core types: block headers as reported by a node, and the error hierarchy"""

import decimal
import math


class HashstatError(Exception):
    """Base class for all hashstat errors"""

class UsageError(HashstatError):
    """Command line was not understood"""

class RangeError(HashstatError):
    """Requested block range is not available on the chain"""

class ProviderError(HashstatError):
    """Block data provider returned malformed or missing data"""

class DegenerateInputError(HashstatError):
    """Statistics were requested over a window that cannot produce them

    For instance a zero-length or time-reversed window, which would otherwise
    yield an infinite or NaN hashrate.
    """


def calc_difficulty(nBits):
    """Calculate difficulty from nBits target"""
    nShift = (nBits >> 24) & 0xff
    dDiff = float(0x0000ffff) / float(nBits & 0x00ffffff)
    while nShift < 29:
        dDiff *= 256.0
        nShift += 1
    while nShift > 29:
        dDiff /= 256.0
        nShift -= 1
    return dDiff


def _is_int(value):
    # bool is an int subclass, but never a valid height or timestamp
    return isinstance(value, int) and not isinstance(value, bool)


class BlockHeader(object):
    """A block header, as seen through a node's getblockheader call

    Only the fields needed to walk the chain and measure it are kept. Instances
    are immutable.
    """
    __slots__ = ['height', 'hash', 'mediantime', 'difficulty', 'nextblockhash']

    def __init__(self, height, hash, mediantime, difficulty, nextblockhash=None):
        object.__setattr__(self, 'height', height)
        object.__setattr__(self, 'hash', hash)
        object.__setattr__(self, 'mediantime', mediantime)
        object.__setattr__(self, 'difficulty', difficulty)
        object.__setattr__(self, 'nextblockhash', nextblockhash)

    def __setattr__(self, name, value):
        raise AttributeError('Object is immutable')

    def __delattr__(self, name):
        raise AttributeError('Object is immutable')

    def __eq__(self, other):
        if not isinstance(other, BlockHeader):
            return NotImplemented
        return all(getattr(self, k) == getattr(other, k) for k in self.__slots__)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(tuple(getattr(self, k) for k in self.__slots__))

    @classmethod
    def from_json(cls, r):
        """Decode the verbose result of getblockheader

        Raises ProviderError if a required field is missing or has the wrong
        type. If difficulty is absent it is derived from the compact bits.
        """
        if not isinstance(r, dict):
            raise ProviderError('block header must be a JSON object; got %r' % (r,))

        for field in ('height', 'hash', 'mediantime'):
            if field not in r:
                raise ProviderError('block header missing %r field: %r' % (field, r))

        height = r['height']
        if not _is_int(height) or height < 0:
            raise ProviderError('bad block height %r' % (height,))

        block_hash = r['hash']
        if not isinstance(block_hash, str):
            raise ProviderError('bad block hash %r' % (block_hash,))

        mediantime = r['mediantime']
        if not _is_int(mediantime):
            raise ProviderError('bad mediantime %r at height %d' % (mediantime, height))

        if 'difficulty' in r:
            difficulty = r['difficulty']
            if _is_int(difficulty) or isinstance(difficulty, (float, decimal.Decimal)):
                difficulty = float(difficulty)
            else:
                raise ProviderError('bad difficulty %r at height %d' % (difficulty, height))
        elif 'bits' in r:
            try:
                difficulty = calc_difficulty(int(r['bits'], 16))
            except (TypeError, ValueError, ZeroDivisionError):
                raise ProviderError('bad bits %r at height %d' % (r['bits'], height))
        else:
            raise ProviderError('block header missing difficulty at height %d' % height)

        if not math.isfinite(difficulty) or difficulty < 0:
            raise ProviderError('bad difficulty %r at height %d' % (difficulty, height))

        nextblockhash = r.get('nextblockhash')
        if nextblockhash is not None and not isinstance(nextblockhash, str):
            raise ProviderError('bad nextblockhash %r at height %d' % (nextblockhash, height))

        return cls(height, block_hash, mediantime, difficulty, nextblockhash)

    def __repr__(self):
        return "%s(%i, %r, %i, %r, %r)" % \
                (self.__class__.__name__, self.height, self.hash,
                 self.mediantime, self.difficulty, self.nextblockhash)
