'''
Helper for running server-dependent tests.
'''

from io import BytesIO

from tornado.httpclient import HTTPClientError, HTTPRequest, HTTPResponse
from tornado.testing import AsyncHTTPTestCase

from keyspace.client import KeyspaceClient

from .server import KeyspaceServer

class FakeHTTPClient(object):  # pylint: disable=too-few-public-methods
    '''
    Tornado HTTP client wrapper to route the synchronous client's requests
    through the test case's IO loop so test cases work properly.
    '''

    def __init__(self, target):
        self._target = target

    def fetch(self, url, **kwargs):
        return self._target.fetch(url, raise_error=True, **kwargs)

class StubHTTPClient(object):
    '''
    HTTP client returning canned responses and recording all requests.

    Each canned response is a `(code, body)` tuple or an exception to raise.
    Responses with a code of 400 or more are raised as `HTTPClientError`
    like the real client does.
    '''

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def fetch(self, url, method='GET', body=None, headers=None):
        request = HTTPRequest(url, method=method, body=body, headers=headers)
        self.requests.append(request)

        canned = self.responses.pop(0)
        if isinstance(canned, Exception):
            raise canned

        (code, data) = canned
        if isinstance(data, str):
            data = data.encode('utf-8')
        response = HTTPResponse(request, code, buffer=BytesIO(data))

        if code >= 400:
            raise HTTPClientError(code, response=response)
        return response

class ServerDependentTestCase(AsyncHTTPTestCase):
    '''
    Unit test base class that sets up a keyspace server and client just
    for the tests in this case.
    '''

    def setUp(self):
        '''
        Initialize the client.
        '''
        super(ServerDependentTestCase, self).setUp()
        self.client = KeyspaceClient(self.get_url(''), client=FakeHTTPClient(self))

    def get_app(self):
        '''
        Initialize the server.
        '''
        self.server = KeyspaceServer()
        return self.server
