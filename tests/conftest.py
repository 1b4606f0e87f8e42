from unittest.mock import AsyncMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from jsonstore import DictTransport, JsonStore, Response

API_URL = 'https://www.jsonstore.io'
TOKEN = 'a1b2c3d4e5f6'


@pytest.fixture()
def token():
    return TOKEN


@pytest.fixture()
def dict_transport():
    return DictTransport(API_URL)


@pytest.fixture()
def store(dict_transport, token):
    return JsonStore(token, base_url=API_URL, transport=dict_transport)


def _mock_transport(response):
    class MockTransport:
        request = AsyncMock(return_value=response)
    return MockTransport()


@pytest.fixture()
def failing_transport():
    return _mock_transport(Response(
        success=False,
        status_code=500,
        status_message='Internal Server Error',
    ))


@pytest.fixture()
def failing_store(failing_transport, token):
    return JsonStore(token, base_url=API_URL, transport=failing_transport)


@pytest.fixture()
async def jsonstore_server():
    """Local aiohttp app answering like jsonstore.io"""
    seen = []

    async def handler(request):
        body = await request.text()
        seen.append({
            'method': request.method,
            'path': request.path,
            'content_type': request.headers.get('Content-Type'),
            'body': body,
        })
        if request.path == '/get-token':
            return web.json_response({'ok': True, 'token': 'f00dfeed42'})
        if request.path.startswith('/broken'):
            return web.Response(status=503, reason='Service Unavailable')
        if request.path.startswith('/garbled'):
            return web.Response(body=b'\xff\xfe{"ok": true}', content_type='application/json')
        if request.path.startswith('/refused'):
            return web.json_response({'ok': False})
        if request.method == 'HEAD':
            return web.Response()
        if request.method == 'GET':
            return web.json_response({'ok': True, 'result': {'name': 'Filip'}})
        return web.json_response({'ok': True})

    app = web.Application()
    app.router.add_route('*', '/{tail:.*}', handler)
    server = TestServer(app)
    await server.start_server()
    server.seen = seen
    yield server
    await server.close()


@pytest.fixture()
def make_transport():
    return _mock_transport
