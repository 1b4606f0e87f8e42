import asyncio
from collections.abc import Mapping
from enum import Enum
import logging
import os

from jsonstore import codec, errors, validate
from jsonstore.transport import JSON_HEADER, AiohttpTransport, Request

API_URL = os.getenv('JSONSTORE_URL', 'https://www.jsonstore.io')
REJECT_ERROR = "Couldn't reach JsonStore! Got status message {} with error code {}."
NO_TOKEN_WARNING = "You didn't put in a token, which means data will never be saved properly."

log = logging.getLogger('JsonStore')


class State(Enum):
    live = 1
    destroyed = 2


def _quote(text):
    text = str(text).replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n')
    return f'"{text}"'


def reject_message(res) -> str:
    return REJECT_ERROR.format(_quote(res.status_message), res.status_code)


class JsonStore:
    """
    Handle for one token namespace of a jsonstore.io endpoint.

    The *_async methods are coroutines which return the result or raise
    a JsonStoreError. The blocking methods of the same name run them on
    a fresh event loop, log failures and return False instead, so they
    must not be called from a running event loop.

    Without a token a new one is fetched from the get-token endpoint.
    Use `await JsonStore.create()` for that from async code.
    """

    def __init__(self, token=None, base_url=None, transport=None, http_session=None):
        self._setup(base_url, transport, http_session)
        if token is None:
            log.warning(NO_TOKEN_WARNING)
            asyncio.run(self._provision())
        else:
            self._token = validate.match_token(token)

    @classmethod
    async def create(cls, token=None, base_url=None, transport=None, http_session=None):
        self = cls.__new__(cls)
        self._setup(base_url, transport, http_session)
        if token is None:
            log.warning(NO_TOKEN_WARNING)
            await self._provision()
        else:
            self._token = validate.match_token(token)
        return self

    def _setup(self, base_url, transport, http_session):
        self.base_url = (base_url or API_URL).rstrip('/')
        if transport is None:
            transport = AiohttpTransport(http_session)
        self.transport = transport
        self._token = None
        self._state = State.live

    def __repr__(self):
        return f'<JsonStore {self._state.name} token={self._token!r}>'

    async def _provision(self):
        req = Request(url=f'{self.base_url}/get-token', method='GET')
        try:
            data = await self._transact(req, check_ok=False)
            token = data.get('token') if isinstance(data, Mapping) else None
            if not token:
                raise errors.tokenProvisionFailed('response has no token')
            # a malformed minted token is a server fault, not a bad argument
            self._token = validate.match_token(token)
        except errors.JsonStoreError as e:
            log.warning(f'Function JsonStore._provision failed to execute, got error {e}.')
            raise errors.tokenProvisionFailed(f'Cannot get a token: {e}') from e

    def _ensure_live(self):
        if self._state is State.destroyed:
            raise errors.storeDestroyed()

    async def _transact(self, req: Request, check_ok=True):
        res = await self.transport.request(req)
        if not res.success or not res.body:
            raise errors.transportFailed(reject_message(res))
        data = codec.decode(res.body)
        if check_ok and not (isinstance(data, Mapping) and data.get('ok')):
            raise errors.serverRejected(reject_message(res))
        return data

    def get_url(self) -> str:
        self._ensure_live()
        return f'{self.base_url}/{self._token}'

    def get_token(self, full_url=False) -> str:
        self._ensure_live()
        if full_url:
            return self.get_url()
        return self._token

    async def ping_async(self) -> bool:
        self._ensure_live()
        res = await self.transport.request(Request(url=self.get_url(), method='HEAD'))
        if not res.success:
            raise errors.transportFailed(reject_message(res))
        return True

    async def get_async(self, path):
        self._ensure_live()
        validate.check_path(path)
        data = await self._transact(Request(url=self.get_url() + path, method='GET'))
        result = data.get('result')
        return {} if result is None else result

    async def get_default_async(self, path, default_data):
        """Return data at path, storing default_data first if there is none.

        Not atomic: two callers racing on an empty path both PUT.
        """
        self._ensure_live()
        validate.check_put(path, default_data, 'defaultData')
        current = await self.get_async(path)
        if validate.is_empty_mapping(current):
            return await self.put_async(path, default_data)
        return current

    async def delete_async(self, path) -> bool:
        self._ensure_live()
        validate.check_path(path)
        data = await self._transact(Request(url=self.get_url() + path, method='DELETE'))
        return data['ok']

    async def put_async(self, path, content):
        return await self._send_content('PUT', path, content)

    async def post_async(self, path, content):
        return await self._send_content('POST', path, content)

    async def _send_content(self, method, path, content):
        self._ensure_live()
        validate.check_put(path, content)
        body = codec.encode(content)
        await self._transact(Request(
            url=self.get_url() + path,
            method=method,
            headers=dict(JSON_HEADER),
            body=body,
        ))
        # echo what was sent, not what the server answered
        return codec.decode(body)

    def _run(self, name, method, *args):
        self._ensure_live()
        try:
            return asyncio.run(method(*args))
        except errors.JsonStoreError as e:
            log.warning(f'Function JsonStore.{name} failed to execute, got error {e}.')
            return False

    def ping(self) -> bool:
        return self._run('ping', self.ping_async)

    def get(self, path):
        return self._run('get', self.get_async, path)

    def get_default(self, path, default_data):
        return self._run('get_default', self.get_default_async, path, default_data)

    def delete(self, path) -> bool:
        return self._run('delete', self.delete_async, path)

    def put(self, path, content):
        return self._run('put', self.put_async, path, content)

    def post(self, path, content):
        return self._run('post', self.post_async, path, content)

    def destroy(self):
        """Detach the store from its transport. Any later call raises storeDestroyed."""
        self._state = State.destroyed
        self.transport = None
        self._token = None
