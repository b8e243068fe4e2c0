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

# Note that setup.py can break if __init__.py imports any external
# dependencies, as these might not be installed when setup.py runs. In this
# case __version__ could be moved to a separate version.py and imported here.
__version__ = '0.3.0'


class ChainParams(object):
    """Per-network parameters used to reach a node and interpret its chain"""
    NAME = None
    RPC_PORT = None

    # Subdirectory of the data directory holding this network's cookie file
    DATADIR_NAME = None

    # Target of one block every ten minutes
    BLOCKS_PER_DAY = 144

    # Retarget cadence, identical on every Bitcoin network
    DIFFICULTY_ADJUSTMENT_INTERVAL = 2016

class MainParams(ChainParams):
    NAME = 'mainnet'
    RPC_PORT = 8332

class TestNetParams(ChainParams):
    NAME = 'testnet'
    RPC_PORT = 18332
    DATADIR_NAME = 'testnet3'

class TestNet4Params(ChainParams):
    NAME = 'testnet4'
    RPC_PORT = 48332
    DATADIR_NAME = 'testnet4'

class SigNetParams(ChainParams):
    NAME = 'signet'
    RPC_PORT = 38332
    DATADIR_NAME = 'signet'

class RegTestParams(ChainParams):
    NAME = 'regtest'
    RPC_PORT = 18443
    DATADIR_NAME = 'regtest'


ClientParams = {
    'mainnet':  MainParams,
    'testnet':  TestNetParams,
    'testnet4': TestNet4Params,
    'signet':   SigNetParams,
    'regtest':  RegTestParams,
}

"""Master global setting for what chain params we're using.

However, don't set this directly, use SelectParams() instead.
"""
params = MainParams()

def SelectParams(name):
    """Select the chain parameters to use

    name is one of 'mainnet', 'testnet', 'testnet4', 'signet' or 'regtest'

    Default chain is 'mainnet'
    """
    global params
    try:
        params = ClientParams[name]()
    except KeyError:
        raise ValueError('Unknown chain %r' % name)
