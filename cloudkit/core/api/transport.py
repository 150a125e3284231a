"""
Async HTTP transport.

Thin aiohttp wrapper used by providers and by the upload pipeline. It
returns every response as an HTTPResult regardless of status; deciding
what counts as a failure is left to the vendor-specific callers.
Network errors (aiohttp.ClientError, asyncio.TimeoutError) propagate
unchanged.
"""
import json as jsonlib
import time
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Callable, Dict, Mapping, Optional

import aiohttp

from .config import APIConfig
from ..models import Credential
from ..logging import get_logger

_UNSET = object()

FractionCallback = Callable[[float], None]


@dataclass
class HTTPResult:
    """
    Decoded HTTP response.

    Attributes:
        status_code: HTTP status
        content: Raw body bytes
        headers: Response headers
        url: Requested URL
    """
    status_code: int
    content: bytes = b''
    headers: Mapping[str, str] = field(default_factory=dict)
    url: str = ''
    _json: Any = field(default=_UNSET, init=False, repr=False, compare=False)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        return self.content.decode('utf-8', errors='replace')

    @property
    def json(self) -> Any:
        """JSON view of the body, decoded once. None if the body is not JSON."""
        if self._json is _UNSET:
            try:
                self._json = jsonlib.loads(self.content) if self.content else None
            except ValueError:
                self._json = None
        return self._json


class AsyncTransport:
    """
    Asynchronous HTTP transport.

    Features:
    - Connection pooling through one shared aiohttp session
    - Bearer authorization from a Credential on API calls
    - Body upload progress for PUT requests

    Example:
        >>> async with AsyncTransport(APIConfig(), credential) as transport:
        ...     result = await transport.post(url, json={'drive_id': '1'})
        ...     print(result.status_code, result.json)
    """

    BODY_SLICE_SIZE = 64 * 1024

    def __init__(
        self,
        config: Optional[APIConfig] = None,
        credential: Optional[Credential] = None,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize transport.

        Args:
            config: Transport configuration (uses defaults if not provided)
            credential: Credential used for the Authorization header
            session: Optional shared aiohttp session (not closed by close())
        """
        self._config = config or APIConfig()
        self._credential = credential
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger('cloudkit.api')

    @property
    def config(self) -> APIConfig:
        return self._config

    @property
    def credential(self) -> Optional[Credential]:
        return self._credential

    @credential.setter
    def credential(self, value: Optional[Credential]):
        self._credential = value

    async def __aenter__(self) -> 'AsyncTransport':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(**self._config.connector_kwargs())
            self._session = aiohttp.ClientSession(
                connector=connector,
                **self._config.session_kwargs()
            )
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the session if this transport created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    def _auth_headers(self) -> Dict[str, str]:
        if self._credential is None:
            return {}
        return {'Authorization': self._credential.authorization}

    async def post(
        self,
        url: str,
        json: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        authorized: bool = True
    ) -> HTTPResult:
        """
        POST a JSON body.

        Args:
            url: Target URL
            json: JSON object to send (an empty object when None)
            headers: Extra headers
            authorized: Attach the Authorization header

        Returns:
            HTTPResult for any status code
        """
        request_headers = {'Content-Type': 'application/json'}
        if authorized:
            request_headers.update(self._auth_headers())
        if headers:
            request_headers.update(headers)

        body = jsonlib.dumps(json if json is not None else {})
        return await self._send('POST', url, data=body, headers=request_headers)

    async def put(
        self,
        url: str,
        body: bytes,
        headers: Optional[Dict[str, str]] = None,
        progress_callback: Optional[FractionCallback] = None
    ) -> HTTPResult:
        """
        PUT raw bytes, reporting the fraction of the body handed to the socket.

        Presigned part URLs carry their own signature, so no Authorization
        header is attached here.

        Args:
            url: Target URL
            body: Bytes to send
            headers: Request headers
            progress_callback: Called with a fraction in [0, 1] as the body is sent

        Returns:
            HTTPResult for any status code
        """
        request_headers = dict(headers or {})
        request_headers['Content-Length'] = str(len(body))

        data: Any = body
        if progress_callback is not None and body:
            data = self._body_stream(body, progress_callback)

        result = await self._send(
            'PUT',
            url,
            data=data,
            headers=request_headers,
            timeout=self._config.timeout.part_timeout()
        )
        if progress_callback is not None and not body:
            progress_callback(1.0)
        return result

    async def _body_stream(
        self,
        body: bytes,
        progress_callback: FractionCallback
    ) -> AsyncIterator[bytes]:
        total = len(body)
        view = memoryview(body)
        sent = 0
        while sent < total:
            piece = view[sent:sent + self.BODY_SLICE_SIZE]
            yield bytes(piece)
            sent += len(piece)
            progress_callback(sent / total)

    async def _send(self, method: str, url: str, **kwargs) -> HTTPResult:
        session = await self._ensure_session()
        # Presigned part URLs carry their signature in the query string
        shown = url.split('?', 1)[0]

        started = time.time()
        self._logger.debug(f"{method} {shown}")
        async with session.request(method, url, **self._config.request_kwargs(), **kwargs) as response:
            content = await response.read()
            elapsed = time.time() - started
            self._logger.debug(
                f"{method} {shown} -> {response.status} ({len(content)} bytes, {elapsed:.2f}s)"
            )
            return HTTPResult(
                status_code=response.status,
                content=content,
                headers=dict(response.headers),
                url=url
            )
