'''
Exceptions raised by the keyspace client.

Errors reported by the server in a response body are domain errors and
derive from `EtcdError`. They carry the server's `message` and `errorCode`
unchanged. Responses that cannot be interpreted and requests that never
produced a response are fatal and derive from `RuntimeError` instead, so
callers can tell them apart from domain errors.
'''

class KeyspaceError(Exception):
    '''
    Base class for all keyspace client errors.
    '''

class EtcdError(KeyspaceError):
    '''
    Error reported by the server for a keyspace operation.
    '''

    def __init__(self, message, error_code=None):
        super(EtcdError, self).__init__(message, error_code)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        if self.error_code is None:
            return str(self.message)
        return '{} ({})'.format(self.message, self.error_code)

class KeyNotFoundError(EtcdError, KeyError):
    '''
    The key for a read or update does not exist.
    '''

class KeyExistsError(EtcdError, ValueError):
    '''
    The key for a create already exists.
    '''

class MalformedResponseError(KeyspaceError, RuntimeError):
    '''
    The server response is not a JSON object of the expected shape.
    '''

class TransportError(KeyspaceError, RuntimeError):
    '''
    The HTTP request failed without producing a response.
    '''
