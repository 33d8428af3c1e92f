"""
HTTP Exchange

Design Decision: Host Integration
=================================

Options Considered:
1. Return a Starlette StreamingResponse from the streamer
   - Headers and body are produced by Starlette, so the send order
     (headers, then chunks, then callback) is out of our hands

2. Abstract request/response pair the streamer drives itself
   - Streamer decides when headers go out and polls for disconnects
   - Any host can plug in (ASGI, tests, a raw socket)

Decision: Abstract exchange
- HTTPExchange lists the capabilities a host must provide
- ASGIExchange implements them on top of an ASGI send callable and a
  Starlette Request (for the Range header and disconnect polling)
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from starlette.requests import Request
from starlette.types import Message, Send

from ..errors import ClientDisconnected
from .headers import ResponseHead

logger = logging.getLogger(__name__)


class HTTPExchange(ABC):
    """
    One HTTP request/response pair as seen by the streamer.

    Attributes:
        range_header: Raw Range header of the request, or None
    """

    def __init__(self, range_header: Optional[str] = None):
        self.range_header = range_header

    @abstractmethod
    def disable_output_buffering(self):
        """Make sure written chunks are not held back before the socket."""

    @abstractmethod
    def disable_compression(self):
        """Keep transparent compression away from this response."""

    @abstractmethod
    async def start(self, head: ResponseHead):
        """Send status line and headers."""

    @abstractmethod
    async def write(self, data: bytes):
        """
        Write body bytes.

        Raises:
            ClientDisconnected: if the peer has gone away
        """

    @abstractmethod
    async def flush(self):
        """Push written bytes towards the client."""

    @abstractmethod
    async def is_disconnected(self) -> bool:
        """True once the client has closed the connection."""


class ASGIExchange(HTTPExchange):
    """
    Exchange backed by an ASGI connection.

    Body chunks go out as ``http.response.body`` messages with
    ``more_body`` set; ``finish`` sends the closing empty message.
    """

    def __init__(self, request: Request, send: Send):
        super().__init__(range_header=request.headers.get('range'))
        self.request = request
        self._send = send
        self._extra_headers: List[Tuple[str, str]] = []
        self._started = False
        self._finished = False
        self._disconnected = False

    @property
    def started(self) -> bool:
        return self._started

    def disable_output_buffering(self):
        # Honoured by nginx and most reverse proxies
        self._extra_headers.append(('X-Accel-Buffering', 'no'))

    def disable_compression(self):
        # GZipMiddleware leaves responses with a Content-Encoding alone
        self._extra_headers.append(('Content-Encoding', 'identity'))

    async def start(self, head: ResponseHead):
        raw_headers = [
            (name.lower().encode('latin-1'), value.encode('latin-1'))
            for name, value in head.headers + self._extra_headers
        ]
        await self._send_message({
            'type': 'http.response.start',
            'status': head.status,
            'headers': raw_headers,
        })
        self._started = True

    async def write(self, data: bytes):
        await self._send_message({
            'type': 'http.response.body',
            'body': data,
            'more_body': True,
        })

    async def flush(self):
        # ASGI servers hand every body message to the transport as it arrives
        pass

    async def finish(self):
        """Close the response body, unless the client is already gone."""
        if self._finished or self._disconnected:
            return
        try:
            await self._send_message({'type': 'http.response.body', 'body': b'', 'more_body': False})
        except ClientDisconnected:
            return
        self._finished = True

    async def is_disconnected(self) -> bool:
        if self._disconnected:
            return True
        if await self.request.is_disconnected():
            self._disconnected = True
        return self._disconnected

    async def _send_message(self, message: Message):
        if self._disconnected:
            raise ClientDisconnected("Connection closed")
        try:
            await self._send(message)
        except OSError as e:
            self._disconnected = True
            logger.debug(f"Send failed, client gone: {e}")
            raise ClientDisconnected(str(e)) from e
