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

"""Block data providers

Anything that can answer the three queries of BlockDataProvider can be
measured: a node over JSON-RPC (see hashstat.rpc.Proxy) or a chain held in
memory.
"""

import hashlib

from hashstat.core import BlockHeader, ProviderError


class BlockDataProvider(object):
    """Source of block headers for a single, linear chain"""

    def get_chain_tip_height(self):
        """Return the height of the best block"""
        raise NotImplementedError

    def get_header_by_height(self, height):
        """Return the BlockHeader at height on the best chain"""
        raise NotImplementedError

    def get_header_by_hash(self, block_hash):
        """Return the BlockHeader with hash block_hash"""
        raise NotImplementedError


class ChainFixture(BlockDataProvider):
    """A chain held in memory

    headers must be ordered by height, starting at zero, with each header's
    nextblockhash naming its successor. Useful for testing and for replaying
    header dumps.
    """

    def __init__(self, headers):
        self.headers = list(headers)
        self._by_hash = {}
        for i, header in enumerate(self.headers):
            if header.height != i:
                raise ValueError('header %r found at position %d' % (header, i))
            self._by_hash[header.hash] = header

    @classmethod
    def from_samples(cls, samples):
        """Build a chain from (mediantime, difficulty) pairs

        Hashes are synthesized from the height.
        """
        samples = list(samples)
        hashes = [hashlib.sha256(b'%d' % i).hexdigest() for i in range(len(samples))]
        headers = []
        for i, (mediantime, difficulty) in enumerate(samples):
            nextblockhash = hashes[i+1] if i+1 < len(samples) else None
            headers.append(BlockHeader(i, hashes[i], mediantime, difficulty, nextblockhash))
        return cls(headers)

    def get_chain_tip_height(self):
        if not self.headers:
            raise ProviderError('chain is empty')
        return len(self.headers) - 1

    def get_header_by_height(self, height):
        if not 0 <= height < len(self.headers):
            raise ProviderError('no block at height %d' % height)
        return self.headers[height]

    def get_header_by_hash(self, block_hash):
        try:
            return self._by_hash[block_hash]
        except KeyError:
            raise ProviderError('unknown block hash %r' % block_hash)
