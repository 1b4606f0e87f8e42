import asyncio
from dataclasses import dataclass
import logging
import os
from time import monotonic
from typing import Optional, Union

from aiohttp import ClientError, ClientSession, ClientTimeout

from jsonstore import errors

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
TIMEOUT = float(os.getenv('JSONSTORE_TIMEOUT', 30))  # seconds
log = logging.getLogger('JsonStore')
log.setLevel(LOG_LEVEL)

JSON_HEADER = {'Content-Type': 'application/json'}


@dataclass
class Request:
    url: str
    method: str = 'GET'
    headers: Optional[dict] = None
    body: Optional[str] = None


@dataclass
class Response:
    success: bool
    status_code: int
    status_message: str
    body: Optional[Union[str, bytes]] = None


def log_request(req: Request, res: Response, elapsed: float):
    log.debug(f'JSONSTORE {req.method} {req.url} {res.status_code} {elapsed:0.3f} ms')


class AiohttpTransport:
    """Sends Requests over HTTP with aiohttp.

    Without http_session a new ClientSession is opened for each request,
    so the transport works from any event loop, including the short lived
    loops of the synchronous JsonStore methods.
    """

    def __init__(self, http_session=None, timeout=None):
        self.http = http_session
        self.timeout = ClientTimeout(total=TIMEOUT if timeout is None else timeout)

    async def request(self, req: Request) -> Response:
        t0 = monotonic() * 1000
        try:
            if self.http is not None:
                res = await self._send(self.http, req)
            else:
                async with ClientSession(timeout=self.timeout) as http:
                    res = await self._send(http, req)
        except (ClientError, asyncio.TimeoutError) as e:
            raise errors.transportFailed(
                f"Couldn't reach JsonStore! {req.method} {req.url} failed with {e.__class__.__name__}: {e}"
            ) from e
        log_request(req, res, monotonic() * 1000 - t0)
        return res

    async def _send(self, http, req):
        async with http.request(
            req.method,
            req.url,
            headers=req.headers,
            data=req.body,
            timeout=self.timeout,
        ) as res:
            # raw bytes, decoding is left to the codec
            body = await res.read() if req.method != 'HEAD' else None
            return Response(
                success=200 <= res.status < 300,
                status_code=res.status,
                status_message=res.reason or '',
                body=body or None,
            )
