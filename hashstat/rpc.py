# Copyright (C) 2007 Jan-Klaas Kollhof
# Copyright (C) 2011-2024 The python-hashstat developers
#
# This file is part of python-hashstat.
#
# It is subject to the license terms in the LICENSE file found in the top-level
# directory of this distribution.
#
# No part of python-hashstat, including this file, may be copied, modified,
# propagated, or distributed except according to the terms contained in the
# LICENSE file.

"""Bitcoin Core RPC support

By default this uses the standard library ``json`` module. By monkey patching,
a different implementation can be used instead, at your own risk:

>>> import simplejson
>>> import hashstat.rpc
>>> hashstat.rpc.json = simplejson

(``simplejson`` is the externally maintained version of the same module and
thus better optimized but perhaps less stable.)
"""

import base64
import decimal
import http.client as httplib
import json
import logging
import os
import platform
import urllib.parse as urlparse

import hashstat
from hashstat.core import BlockHeader, ProviderError
from hashstat.provider import BlockDataProvider

DEFAULT_USER_AGENT = "AuthServiceProxy/0.1"

DEFAULT_HTTP_TIMEOUT = 30

log = logging.getLogger(__name__)


class JSONRPCError(ProviderError):
    """JSON-RPC protocol error base class

    Subclasses of this class also exist for specific types of errors; the set
    of all subclasses is by no means complete.
    """

    SUBCLS_BY_CODE = {}

    @classmethod
    def _register_subcls(cls, subcls):
        cls.SUBCLS_BY_CODE[subcls.RPC_ERROR_CODE] = subcls
        return subcls

    def __new__(cls, rpc_error):
        assert cls is JSONRPCError
        cls = JSONRPCError.SUBCLS_BY_CODE.get(rpc_error['code'], cls)

        self = Exception.__new__(cls)

        super(JSONRPCError, self).__init__(
            'msg: %r  code: %r' %
            (rpc_error['message'], rpc_error['code']))
        self.error = rpc_error

        return self

    def __init__(self, rpc_error):
        # Everything was set up in __new__
        pass

@JSONRPCError._register_subcls
class ForbiddenBySafeModeError(JSONRPCError):
    RPC_ERROR_CODE = -2

@JSONRPCError._register_subcls
class InvalidAddressOrKeyError(JSONRPCError):
    RPC_ERROR_CODE = -5

@JSONRPCError._register_subcls
class InvalidParameterError(JSONRPCError):
    RPC_ERROR_CODE = -8

@JSONRPCError._register_subcls
class InWarmupError(JSONRPCError):
    RPC_ERROR_CODE = -28

@JSONRPCError._register_subcls
class MethodNotFoundError(JSONRPCError):
    RPC_ERROR_CODE = -32601


def default_conf_file():
    """Return the platform's default path to bitcoin.conf"""
    if platform.system() == 'Darwin':
        datadir = os.path.expanduser('~/Library/Application Support/Bitcoin/')
    elif platform.system() == 'Windows':
        datadir = os.path.join(os.environ['APPDATA'], 'Bitcoin')
    else:
        datadir = os.path.expanduser('~/.bitcoin')
    return os.path.join(datadir, 'bitcoin.conf')


def parse_conf_file(file_object):
    """Parse the key = value lines of a bitcoin.conf file object

    Comments, including inline ones, and lines without '=' are skipped.
    """
    conf = {}
    for line in file_object.readlines():
        if '#' in line:
            line = line[:line.index('#')]
        if '=' not in line:
            continue
        k, v = line.split('=', 1)
        conf[k.strip()] = v.strip()
    return conf


def get_authpair(conf, network, btc_conf_file):
    """Return the "user:password" pair used to authenticate

    The cookie file bitcoind writes into its data directory takes precedence
    over rpcuser/rpcpassword from the configuration.

    Raises ValueError if neither is available.
    """
    cookie_dir = conf.get('datadir', os.path.dirname(btc_conf_file))
    datadir_name = hashstat.ClientParams[network].DATADIR_NAME \
            if network in hashstat.ClientParams else network
    if datadir_name is not None and network != 'mainnet':
        cookie_dir = os.path.join(cookie_dir, datadir_name)
    cookie_file = os.path.join(cookie_dir, ".cookie")
    try:
        with open(cookie_file, 'r') as fd:
            authpair = fd.read().strip()
            log.debug('using RPC cookie from %s', cookie_file)
            return authpair
    except IOError as err:
        if 'rpcpassword' in conf:
            return "%s:%s" % (conf.get('rpcuser', ''), conf['rpcpassword'])
        raise ValueError('Cookie file unusable (%s) and rpcpassword not specified in the configuration file: %r' % (err, btc_conf_file))


class BaseProxy(object):
    """Base JSON-RPC proxy class. Contains only private methods; do not use
    directly."""

    def __init__(self,
                 service_url=None,
                 service_port=None,
                 btc_conf_file=None,
                 timeout=DEFAULT_HTTP_TIMEOUT,
                 connection=None):

        # Create a dummy connection early on so if __init__() fails prior to
        # __conn being created __del__() can detect the condition and handle it
        # correctly.
        self.__conn = None
        authpair = None

        if service_url is None:
            # Figure out the path to the bitcoin.conf file
            if btc_conf_file is None:
                btc_conf_file = default_conf_file()

            # Bitcoin Core accepts empty rpcuser, not specified in btc_conf_file
            conf = {'rpcuser': ""}

            # Treat a missing bitcoin.conf as though it were empty
            try:
                with open(btc_conf_file, 'r') as fd:
                    conf.update(parse_conf_file(fd))
            except FileNotFoundError:
                log.debug('no configuration file at %s', btc_conf_file)

            if service_port is None:
                service_port = hashstat.params.RPC_PORT
            conf['rpcport'] = int(conf.get('rpcport', service_port))
            conf['rpchost'] = conf.get('rpcconnect', 'localhost')

            service_url = ('%s://%s:%d' %
                ('http', conf['rpchost'], conf['rpcport']))

            authpair = get_authpair(conf, hashstat.params.NAME, btc_conf_file)

        else:
            url = urlparse.urlparse(service_url)
            if url.username is not None:
                authpair = "%s:%s" % (urlparse.unquote(url.username),
                                      urlparse.unquote(url.password or ''))

        self.__service_url = service_url
        self.__url = urlparse.urlparse(service_url)

        if self.__url.scheme not in ('http',):
            raise ValueError('Unsupported URL scheme %r' % self.__url.scheme)

        if self.__url.port is None:
            port = httplib.HTTP_PORT
        else:
            port = self.__url.port
        self.__id_count = 0

        if authpair is None:
            self.__auth_header = None
        else:
            authpair = authpair.encode('utf8')
            self.__auth_header = b"Basic " + base64.b64encode(authpair)

        if connection:
            self.__conn = connection
        else:
            self.__conn = httplib.HTTPConnection(self.__url.hostname, port=port,
                                                 timeout=timeout)
        log.debug('RPC proxy for %s://%s:%d%s', self.__url.scheme,
                  self.__url.hostname, port, self.__url.path)

    def _call(self, service_name, *args):
        self.__id_count += 1

        postdata = json.dumps({'version': '1.1',
                               'method': service_name,
                               'params': args,
                               'id': self.__id_count})

        headers = {
            'Host': self.__url.hostname,
            'User-Agent': DEFAULT_USER_AGENT,
            'Content-type': 'application/json',
        }

        if self.__auth_header is not None:
            headers['Authorization'] = self.__auth_header

        log.debug('-%d-> %s %r', self.__id_count, service_name, args)
        self.__conn.request('POST', self.__url.path or '/', postdata, headers)

        response = self._get_response()
        err = response.get('error')
        if err is not None:
            if isinstance(err, dict):
                raise JSONRPCError(
                    {'code': err.get('code', -345),
                     'message': err.get('message', 'error message not specified')})
            raise JSONRPCError({'code': -344, 'message': str(err)})
        elif 'result' not in response:
            raise JSONRPCError({
                'code': -343, 'message': 'missing JSON-RPC result'})
        else:
            return response['result']

    def _get_response(self):
        http_response = self.__conn.getresponse()
        if http_response is None:
            raise JSONRPCError({
                'code': -342, 'message': 'missing HTTP response from server'})

        rdata = http_response.read().decode('utf8')
        try:
            response = json.loads(rdata, parse_float=decimal.Decimal)
        except Exception:
            raise JSONRPCError({
                'code': -342,
                'message': ('non-JSON HTTP response with \'%i %s\' from server: \'%.20s%s\''
                            % (http_response.status, http_response.reason,
                               rdata, '...' if len(rdata) > 20 else ''))})
        if not isinstance(response, dict):
            raise JSONRPCError({
                'code': -342, 'message': 'JSON-RPC response is not an object'})
        return response

    def close(self):
        if self.__conn is not None:
            self.__conn.close()
            self.__conn = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __del__(self):
        if self.__conn is not None:
            self.__conn.close()


class RawProxy(BaseProxy):
    """Low-level proxy to a bitcoin JSON-RPC service

    Unlike ``Proxy``, no conversion is done besides parsing JSON. As far as
    Python is concerned, you can call any method; ``JSONRPCError`` will be
    raised if the server does not recognize it.
    """

    def __getattr__(self, name):
        if name.startswith('__') and name.endswith('__'):
            # Prevent RPC calls for non-existing python internal attribute
            # access. If someone tries to get an internal attribute
            # of RawProxy instance, and the instance does not have this
            # attribute, we do not want the bogus RPC call to happen.
            raise AttributeError(name)

        # Create a callable to do the actual call
        f = lambda *args: self._call(name, *args)

        # Make debuggers show <function hashstat.rpc.name> rather than <function
        # hashstat.rpc.<lambda>>
        f.__name__ = name
        return f


class Proxy(BaseProxy, BlockDataProvider):
    """Proxy to a bitcoin RPC service

    Unlike ``RawProxy``, results are checked and block headers are returned as
    ``hashstat.core.BlockHeader`` objects. Only the blockchain calls needed to
    measure the chain are implemented; you can use ``call`` to access others.

    Also serves as the block data provider for a local node.
    """

    def __init__(self,
                 service_url=None,
                 service_port=None,
                 btc_conf_file=None,
                 timeout=DEFAULT_HTTP_TIMEOUT,
                 **kwargs):
        """Create a proxy object

        If ``service_url`` is not specified, the username and password are read
        out of the file ``btc_conf_file``, or the cookie file next to it. If
        ``btc_conf_file`` is not specified, ``~/.bitcoin/bitcoin.conf`` or
        equivalent is used by default.  The default port is set according to
        the chain parameters in use: mainnet, testnet, signet or regtest.

        Usually no arguments to ``Proxy()`` are needed; the local bitcoind will
        be used.

        ``timeout`` - timeout in seconds before the HTTP interface times out
        """

        super(Proxy, self).__init__(service_url=service_url,
                                    service_port=service_port,
                                    btc_conf_file=btc_conf_file,
                                    timeout=timeout,
                                    **kwargs)

    def call(self, service_name, *args):
        """Call an RPC method by name and raw (JSON encodable) arguments"""
        return self._call(service_name, *args)

    # == Blockchain ==

    def getbestblockhash(self):
        """Return hash of best block in longest block chain."""
        return self._call('getbestblockhash')

    def getblockchaininfo(self):
        """Return a JSON object containing blockchaininfo"""
        return self._call('getblockchaininfo')

    def getblockcount(self):
        """Return the number of blocks in the longest block chain"""
        return self._call('getblockcount')

    def getblockhash(self, height):
        """Return hash of block in best-block-chain at height.

        Raises IndexError if height is not valid.
        """
        try:
            return self._call('getblockhash', height)
        except InvalidParameterError as ex:
            raise IndexError('%s.getblockhash(): %s (%d)' %
                    (self.__class__.__name__, ex.error['message'], ex.error['code']))

    def getblockheader(self, block_hash, verbose=False):
        """Get block header <block_hash>

        verbose - If true a BlockHeader is returned, decoded from the values
                  returned by getblockheader (height, mediantime, difficulty,
                  nextblockhash, etc.); otherwise the serialized header as a
                  hex string.

        Raises IndexError if block_hash is not valid.
        """
        if not isinstance(block_hash, str):
            raise TypeError('%s.getblockheader(): block_hash must be str; got %r instance' %
                    (self.__class__.__name__, block_hash.__class__))
        try:
            r = self._call('getblockheader', block_hash, verbose)
        except InvalidAddressOrKeyError as ex:
            raise IndexError('%s.getblockheader(): %s (%d)' %
                    (self.__class__.__name__, ex.error['message'], ex.error['code']))

        if verbose:
            return BlockHeader.from_json(r)
        else:
            return r

    def getdifficulty(self):
        return float(self._call('getdifficulty'))

    def getnetworkhashps(self, nblocks=120, height=-1):
        """Return the node's own estimate of network hashes per second

        nblocks - number of blocks to average over; -1 averages since the last
                  difficulty change
        height  - estimate at this height; -1 for the tip
        """
        return float(self._call('getnetworkhashps', nblocks, height))

    # == BlockDataProvider ==

    def get_chain_tip_height(self):
        height = self.getblockcount()
        if not isinstance(height, int) or isinstance(height, bool):
            raise ProviderError('getblockcount returned %r' % (height,))
        return height

    def get_header_by_height(self, height):
        try:
            block_hash = self.getblockhash(height)
        except IndexError as ex:
            raise ProviderError(str(ex))
        if not isinstance(block_hash, str):
            raise ProviderError('getblockhash returned %r' % (block_hash,))
        return self.get_header_by_hash(block_hash)

    def get_header_by_hash(self, block_hash):
        try:
            return self.getblockheader(block_hash, verbose=True)
        except IndexError as ex:
            raise ProviderError(str(ex))
