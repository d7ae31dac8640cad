'''

# Keyspace

A client for a hierarchical key-value store served over an HTTP keyspace API.

## Design

The keyspace looks much like a UNIX file system. Every key is a forward-slash
(`/`) delimited path and names a node. A node is either a leaf holding a string
value or a directory holding child nodes. Keys are addressed under the URL
`/<version>/keys/<path>` and the HTTP verbs are mapped as follows.
 - `GET`: read a node or a directory tree
 - `PUT`: set a value, create or update a node or directory
 - `POST`: create a node with a server-generated, in-order key
 - `DELETE`: remove a node or directory

Writes can carry a time-to-live (`ttl`) after which the server expires the key,
and conditions (`prevExist`, `prevValue`, `prevIndex`) which the server checks
atomically before applying the write.

The server reports failures in the response body as a JSON object with an
`errorCode` and a `message`, usually together with a 4xx status. The client
therefore always reads the body, even for "failed" HTTP responses, and raises
the error class matching the operation.
 - `KeyNotFoundError`: reading or updating a key that does not exist
 - `KeyExistsError`: creating a key that already exists
 - `EtcdError`: any other failed write or delete
Responses that are not valid JSON raise `MalformedResponseError` and requests
that never produced a response raise `TransportError`.

### Example

Suppose the keyspace contains the directory `/a` with the key `/a/b`.
```
{
    'action': 'get',
    'node': {
        'key': '/a',
        'dir': True,
        'nodes': [
            {'key': '/a/b', 'value': '4'}
        ]
    }
}
```
The operations below will have the following results.
 - `get('a/b') -> '4'`
 - `ls('a') -> ['/a']`
 - `get_keys_value('a') -> {'/a/b': '4'}`
 - `mk('a/b', '5')` raises `KeyExistsError`

## Usage

The following code snippet creates a client that connects to `localhost`
on the default port.
```
from keyspace.client import KeyspaceClient

client = KeyspaceClient()
client.set_root('app')

client.mkdir('config')
client.set('config/name', 'demo', ttl=60)
client.get('config/name') # -> 'demo'
client.update('config/name', 'other', condition={'prevValue': 'demo'})
```
If no server is given, the `KEYSPACE_SERVER` environment variable is consulted
before falling back to `DEFAULT_SERVER`. Refer to the `KeyspaceClient` class
for the available operations and flags.
'''

DEFAULT_PORT = 2379
DEFAULT_SERVER = 'http://127.0.0.1:{}'.format(DEFAULT_PORT)
DEFAULT_VERSION = 'v2'

SERVER_ENVIRON = 'KEYSPACE_SERVER'
