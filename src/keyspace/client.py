'''
Web client interface to a keyspace server.
'''

import logging

from os import environ
from urllib.parse import urlencode

from tornado.escape import json_decode
from tornado.httpclient import HTTPClient, HTTPClientError
from tornado.httputil import url_concat

import jsonschema

from .core import PathBuilder, flatten
from .errors import EtcdError, KeyExistsError, KeyNotFoundError, MalformedResponseError, TransportError
from . import DEFAULT_SERVER, DEFAULT_VERSION, SERVER_ENVIRON

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

def _encode_args(args):
    '''
    Encode query or form arguments for the keyspace API.

    Booleans are sent as `true` and `false`.
    '''

    encoded = {}
    for (k, v) in args.items():
        if isinstance(v, bool):
            v = 'true' if v else 'false'
        encoded[k] = str(v)

    return encoded

class JSONClientMixin(object):
    '''
    Internal convenience class for sending forms and receiving JSON over HTTP.
    '''

    def __init__(self, base_url, client=None):
        if not base_url.startswith(('http://', 'https://')):
            base_url = 'http://' + base_url

        self._base_url = base_url.rstrip('/')
        self._client = client or HTTPClient()

    def _fetch(self, path, method, form=None, args=None, schema=None):
        '''
        Helper for HTTP requests.

        If `form is not None`, it is form-encoded and sent as the body.
        The query parameters `args` are appended to the URL.

        The response body is decoded as JSON and validated against `schema`
        whatever the HTTP status, since the server reports errors in the
        body. Failures to decode or validate raise `MalformedResponseError`.
        Requests that produce no response at all raise `TransportError`.
        '''

        # build the complete URL
        url = self._base_url + path

        # encode the query parameters
        if args:
            url = url_concat(url, _encode_args(args))

        headers = {'Accept': 'application/json'}

        # encode the form body
        body = None
        if form is not None:
            body = urlencode(_encode_args(form))
            headers['Content-Type'] = 'application/x-www-form-urlencoded'

        # perform the request
        try:
            response = self._client.fetch(url,
                                          method=method,
                                          body=body,
                                          headers=headers)
        except HTTPClientError as exc:
            if exc.response is None:
                logger.error('{} {} failed: {}'.format(method, url, exc))
                raise TransportError('{} {} failed: {}'.format(method, url, exc)) from exc

            # the server reports domain errors in the body of 4xx responses
            response = exc.response
        except OSError as exc:
            logger.error('{} {} failed: {}'.format(method, url, exc))
            raise TransportError('{} {} failed: {}'.format(method, url, exc)) from exc

        logger.debug('{} {} -> {}'.format(method, url, response.code))

        try:
            # see tornado.escape.json_decode()
            obj = json_decode(response.body)
            jsonschema.validate(obj, schema or {'type': 'object'})
        except (ValueError, jsonschema.ValidationError) as exc:
            logger.error('malformed response: {}\
                \n\nResponse:\n{}'.format(exc, response.body))
            raise MalformedResponseError('malformed response') from exc
        else:
            return obj

class KeyspaceClient(JSONClientMixin):
    '''
    Client for reading and manipulating keys on a keyspace server.
    '''

    RESPONSE_SCHEMA = {
        '$schema': 'http://json-schema.org/draft-04/schema#',
        'definitions': {
            'node': {
                'type': 'object',
                'properties': {
                    'key': {'type': 'string'},
                    'value': {'type': 'string'},
                    'dir': {'type': 'boolean'},
                    'ttl': {'type': 'integer'},
                    'expiration': {'type': 'string'},
                    'createdIndex': {'type': 'integer'},
                    'modifiedIndex': {'type': 'integer'},
                    'nodes': {
                        'type': 'array',
                        'items': {'$ref': '#/definitions/node'},
                    },
                },
            },
            'error': {
                'type': 'object',
                'properties': {
                    'errorCode': {'type': 'integer'},
                    'message': {'type': 'string'},
                    'cause': {'type': 'string'},
                    'index': {'type': 'integer'},
                },
                'required': ['errorCode', 'message'],
            },
            'envelope': {
                'type': 'object',
                'properties': {
                    'action': {'type': 'string'},
                    'node': {'$ref': '#/definitions/node'},
                    'prevNode': {'$ref': '#/definitions/node'},
                },
                'required': ['node'],
            },
        },
        'anyOf': [
            {'$ref': '#/definitions/error'},
            {'$ref': '#/definitions/envelope'},
        ],
    }

    VERSION_SCHEMA = {
        '$schema': 'http://json-schema.org/draft-04/schema#',
        'type': 'object',
    }

    def __init__(self, server=None, version=DEFAULT_VERSION, client=None):
        self._server = server
        if not self._server:
            # fall back to environment variable
            self._server = environ.get(SERVER_ENVIRON, None)
        if not self._server:
            # fall back to default
            self._server = DEFAULT_SERVER

        self._paths = PathBuilder(version)

        super(KeyspaceClient, self).__init__(self._server, client=client)

    @property
    def api_version(self):
        return self._paths.version

    @property
    def root(self):
        return self._paths.root

    def set_root(self, root):
        '''
        Set the root directory under which all keys are accessed.

        For example, after `set_root('/app')` the key `config` refers to
        `/app/config` in the keyspace. Returns the client for chaining.
        '''

        self._paths.set_root(root)
        return self

    def _request(self, method, key, form=None, args=None, error=None):
        '''
        Perform a keyspace request for `key` and return the decoded body.

        If `error` is provided and the body carries an error code, `error`
        is raised with the server's message and code.
        '''

        body = self._fetch(self._paths.build(key), method,
                           form=form, args=args,
                           schema=KeyspaceClient.RESPONSE_SCHEMA)

        if error and 'errorCode' in body:
            logger.debug('{} {} -> error {}: {}'.format(method, key, body['errorCode'], body['message']))
            raise error(body['message'], body['errorCode'])

        return body

    def version(self):
        '''
        Return the server and cluster versions reported by the server.
        '''

        return self._fetch('/version', 'GET', schema=KeyspaceClient.VERSION_SCHEMA)

    def get_node(self, key, query=None):
        '''
        Retrieve the node at `key`.

        Extra query parameters such as `recursive` or `sorted` may be passed
        in `query`. Raises `KeyNotFoundError` if the server reports an error.
        '''

        return self._request('GET', key, args=query, error=KeyNotFoundError)['node']

    def get(self, key, flags=None):
        '''
        Retrieve the value at `key`.

        Returns `None` if `key` is a directory.
        '''

        return self.get_node(key, flags).get('value')

    def set(self, key, value, ttl=0, condition=None):
        '''
        Set the value at `key`, creating it if necessary.

        If `ttl`, the key expires after `ttl` seconds. The `condition`
        mapping (`prevExist`, `prevValue`, `prevIndex`) is checked by the
        server before writing. The decoded body is returned as is, even if
        it reports an error.
        '''

        form = {'value': value}
        if ttl:
            form['ttl'] = ttl

        return self._request('PUT', key, form=form, args=condition)

    def mk(self, key, value, ttl=0):
        '''
        Create `key` with `value`.

        Raises `KeyExistsError` if the key already exists.
        '''

        body = self.set(key, value, ttl, {'prevExist': False})
        if 'errorCode' in body:
            raise KeyExistsError(body['message'], body['errorCode'])

        return body

    def update(self, key, value, ttl=0, condition=None):
        '''
        Update the existing `key` with `value`.

        Additional guards may be given in `condition`. Raises
        `KeyNotFoundError` if the server rejects the update.
        '''

        extra = {'prevExist': True}
        if condition:
            extra.update(condition)

        body = self.set(key, value, ttl, extra)
        if 'errorCode' in body:
            raise KeyNotFoundError(body['message'], body['errorCode'])

        return body

    def mkdir(self, key, ttl=0):
        '''
        Create the directory `key`.

        Raises `KeyExistsError` if the key already exists.
        '''

        form = {'dir': True}
        if ttl:
            form['ttl'] = ttl

        return self._request('PUT', key, form=form, args={'prevExist': False}, error=KeyExistsError)

    def update_dir(self, key, ttl):
        '''
        Refresh the TTL of the existing directory `key`.

        A non-zero `ttl` is required.
        '''

        if not ttl:
            raise EtcdError('TTL is required', 204)

        return self._request('PUT', key,
                             form={'ttl': ttl},
                             args={'dir': True, 'prevExist': True},
                             error=EtcdError)

    def rm(self, key):
        '''
        Remove the key `key`.
        '''

        return self._request('DELETE', key, error=EtcdError)

    def rmdir(self, key, recursive=False):
        '''
        Remove the directory `key`.

        If not `recursive`, the directory must be empty.
        '''

        args = {'dir': True}
        if recursive:
            args['recursive'] = True

        return self._request('DELETE', key, args=args, error=EtcdError)

    def list_dir(self, key='/', recursive=False):
        '''
        Retrieve the directory `key` with its children.

        If `recursive`, all descendants are included.
        '''

        args = {}
        if recursive:
            args['recursive'] = True

        return self._request('GET', key, args=args, error=KeyNotFoundError)

    def ls(self, key='/', recursive=False):
        '''
        List the keys of the directories in `key`.

        The keys are listed depth-first in server order, including `key`
        itself unless it is the root.
        '''

        (dirs, _) = flatten(self.list_dir(key, recursive)['node'])
        return dirs

    def get_keys_value(self, root='/', recursive=True, key=None):
        '''
        Get all leaf key and value pairs below `root`.

        If `key` names one of the leaves, only its value is returned.
        Otherwise, the mapping of all leaf keys to values is returned.
        '''

        (_, values) = flatten(self.list_dir(root, recursive)['node'])

        if key is not None:
            if key in values:
                return values[key]
            logger.debug('no value for "{}" below "{}"'.format(key, root))

        return values

    def mkdir_with_in_order_key(self, dir, ttl=0):  # pylint: disable=redefined-builtin
        '''
        Create a directory with a server-generated, in-order key inside `dir`.
        '''

        form = {'dir': True}
        if ttl:
            form['ttl'] = ttl

        return self._request('POST', dir, form=form)

    def set_with_in_order_key(self, dir, value, ttl=0, condition=None):  # pylint: disable=redefined-builtin
        '''
        Create a key with a server-generated, in-order name inside `dir`.
        '''

        form = {'value': value}
        if ttl:
            form['ttl'] = ttl

        return self._request('POST', dir, form=form, args=condition)
