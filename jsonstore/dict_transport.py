from collections.abc import Mapping
from time import monotonic
from urllib.parse import urlsplit
from uuid import uuid4

from jsonstore import codec, errors
from jsonstore.transport import Response, log_request

REASONS = {
    200: 'OK',
    201: 'Created',
    400: 'Bad Request',
    404: 'Not Found',
    405: 'Method Not Allowed',
}


class DictTransport(dict):
    """In-memory stand-in for the jsonstore.io HTTP API.

    Keys are tokens, values are the nested JSON documents stored under them.
    Every Request passed in is kept in self.requests.
    """

    def __init__(self, base_url='https://www.jsonstore.io'):
        super().__init__()
        self.base_url = base_url.rstrip('/')
        self.requests = []

    def count(self, method=None):
        if method is None:
            return len(self.requests)
        return sum(1 for req in self.requests if req.method == method)

    async def request(self, req):
        t0 = monotonic() * 1000
        self.requests.append(req)
        res = self._handle(req)
        log_request(req, res, monotonic() * 1000 - t0)
        return res

    def _handle(self, req):
        if not req.url.startswith(self.base_url):
            return _response(404)
        path = urlsplit(req.url[len(self.base_url):]).path
        parts = [p for p in path.split('/') if p]

        if parts == ['get-token'] and req.method == 'GET':
            token = uuid4().hex + uuid4().hex
            self[token] = {}
            return _response(200, {'ok': True, 'token': token})

        if not parts:
            return _response(400, {'ok': False, 'error': 'token required'})
        token, keys = parts[0], parts[1:]

        if req.method == 'HEAD':
            return _response(200)
        if req.method == 'GET':
            return _response(200, {'ok': True, 'result': self._lookup(token, keys)})
        if req.method in ('PUT', 'POST'):
            try:
                value = codec.decode(req.body)
            except errors.codecFailed:
                return _response(400, {'ok': False, 'error': 'body is not JSON'})
            self._store(token, keys, value)
            return _response(201, {'ok': True})
        if req.method == 'DELETE':
            self._remove(token, keys)
            return _response(200, {'ok': True})
        return _response(405, {'ok': False})

    def _lookup(self, token, keys):
        item = self.get(token)
        for key in keys:
            if not isinstance(item, Mapping) or key not in item:
                return None
            item = item[key]
        return item

    def _store(self, token, keys, value):
        if not keys:
            self[token] = value
            return
        item = self.setdefault(token, {})
        if not isinstance(item, dict):
            item = self[token] = {}
        for key in keys[:-1]:
            child = item.get(key)
            if not isinstance(child, dict):
                child = item[key] = {}
            item = child
        item[keys[-1]] = value

    def _remove(self, token, keys):
        if not keys:
            self.pop(token, None)
            return
        parent = self._lookup(token, keys[:-1])
        if isinstance(parent, dict):
            parent.pop(keys[-1], None)


def _response(status, data=None):
    return Response(
        success=200 <= status < 300,
        status_code=status,
        status_message=REASONS.get(status, ''),
        body=None if data is None else codec.encode(data),
    )
