"""
SendFile Response

A Starlette response that hands the raw ASGI connection to a
FileStreamer, so headers, throttled chunks, and the completion hook
happen in the streamer's order rather than Starlette's.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import Receive, Scope, Send

from ..errors import FileNotReadable, OpenFailed, RangeNotSatisfiable
from ..streamer import FileStreamer
from ..transfer import ASGIExchange, CompletionCallback, TransferResult, TransferState

logger = logging.getLogger(__name__)


class SendFileResponse(Response):
    """
    Stream ``path`` with range and throttle support.

    Errors raised before the first header become plain-text 404, 416,
    or 500 responses. ``result`` holds the TransferResult afterwards.
    """

    def __init__(self, path: Union[str, Path], streamer: Optional[FileStreamer] = None,
                 with_disposition: bool = True,
                 on_complete: Optional[CompletionCallback] = None):
        super().__init__()
        self.path = Path(path)
        self.streamer = streamer or FileStreamer()
        self.with_disposition = with_disposition
        self.on_complete = on_complete
        self.result: Optional[TransferResult] = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        exchange = ASGIExchange(Request(scope, receive), send)

        try:
            self.result = await self.streamer.send(
                self.path,
                exchange,
                with_disposition=self.with_disposition,
                on_complete=self.on_complete,
            )
        except FileNotReadable as e:
            logger.info(f"Not readable: {e.path}")
            error = PlainTextResponse("File not found", status_code=404)
        except RangeNotSatisfiable as e:
            logger.info(f"Unsatisfiable range {e.range_header!r} for {self.path.name}")
            error = PlainTextResponse(
                "Requested Range Not Satisfiable",
                status_code=416,
                headers={'Content-Range': e.content_range, 'Accept-Ranges': 'bytes'},
            )
        except OpenFailed as e:
            logger.error(f"Error opening file: {e}")
            error = PlainTextResponse("Can not open file", status_code=500)
        else:
            # A truncated body must not be closed as if it were complete
            if self.result.state is not TransferState.TRUNCATED:
                await exchange.finish()
            return

        await error(scope, receive, send)
