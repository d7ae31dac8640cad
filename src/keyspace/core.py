'''
Core keyspace components: key path construction and tree flattening.
'''

import logging

from . import DEFAULT_VERSION

logger = logging.getLogger(__name__)  # pylint: disable=invalid-name

SEPARATOR = '/'

class PathBuilder(object):
    '''
    Builds keyspace URIs of the form `/<version>/keys<root><key>`.

    The root is a directory prefix applied to every key. For example,
    with the root `/app` the key `config` maps to `/v2/keys/app/config`.
    '''

    def __init__(self, version=DEFAULT_VERSION, root=''):
        self.version = version
        self.root = ''
        if root:
            self.set_root(root)

    def set_root(self, root):
        '''
        Set the root directory prefixed onto all keys.

        A leading separator is added and trailing separators are removed,
        so `foo`, `/foo` and `/foo/` all store the root `/foo`.
        '''

        if not root.startswith(SEPARATOR):
            root = SEPARATOR + root

        self.root = root.rstrip(SEPARATOR)
        logger.debug('root: "{}"'.format(self.root))

        return self

    def build(self, key):
        '''
        Build the URI for `key` under the current root.
        '''

        if not key.startswith(SEPARATOR):
            key = SEPARATOR + key

        return '{0}{1}/keys{2}{3}'.format(SEPARATOR, self.version, self.root, key)

def flatten(node):
    '''
    Flatten a decoded keyspace tree into directory keys and leaf values.

    The tree is walked depth-first in pre-order, following the child order
    given by the server. Returns the tuple `(dirs, values)` where `dirs`
    lists the keys of all directories except the root `/` in walk order
    and `values` maps the key of each leaf to its value.
    '''

    dirs = []
    values = {}
    _flatten(node, dirs, values)

    return dirs, values

def _flatten(node, dirs, values):
    key = node.get('key')

    if node.get('dir'):
        if key and key != SEPARATOR:
            dirs.append(key)

        for child in node.get('nodes', []):
            _flatten(child, dirs, values)

    elif 'value' in node:
        values[key] = node['value']
