"""
File Streamer - Main Controller

Ties the stages of a send together:
- Range interpretation of the request's Range header
- Response head built from file metadata and policy
- Throttled transfer of the window to the client

Send Order:
1. Readability check (FileNotReadable, nothing sent yet)
2. Range interpretation (RangeNotSatisfiable, nothing sent yet)
3. Open the file (OpenFailed, nothing sent yet)
4. Disable buffering and compression, send headers
5. Stream, call on_complete at end of file, close the file
"""

import asyncio
import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union

import aiofiles

from .errors import ClientDisconnected, OpenFailed
from .file import ContentTypeProbe, FileDescriptor
from .ranges import parse_range
from .transfer import (
    CompletionCallback, HTTPExchange, ThrottledTransfer, TransferPolicy,
    TransferResult, TransferState, build_response_head,
)
from .transfer.loop import SleepFunction
from .transfer.policy import DEFAULT_CHUNK_BYTES, DEFAULT_DELAY_SECONDS

logger = logging.getLogger(__name__)


class FileStreamer:
    """
    Sends files over HTTP with range and throttling support.

    Configure with the setters, then call send() from a request handler:

        streamer = FileStreamer()
        streamer.set_throttle(0.05, 64 * 1024)
        result = await streamer.send(path, exchange)
    """

    def __init__(self, policy: Optional[TransferPolicy] = None,
                 probe: Optional[ContentTypeProbe] = None,
                 sleep: SleepFunction = asyncio.sleep):
        """
        Initialize a streamer.

        Args:
            policy: Initial transfer policy (defaults if not provided)
            probe: Content-type probe used when no type is set
            sleep: Awaitable sleep used between chunks
        """
        self.policy = policy or TransferPolicy()
        self.probe = probe or ContentTypeProbe()
        self._sleep = sleep

    # === Policy ===

    def set_disposition_name(self, name: Optional[str] = None):
        """Download name to suggest; None uses the file's base name."""
        self.policy = replace(self.policy, disposition_name=name or None)

    def set_throttle(self, delay_seconds: float = DEFAULT_DELAY_SECONDS,
                     chunk_bytes: int = DEFAULT_CHUNK_BYTES):
        """Send ``chunk_bytes`` every ``delay_seconds``."""
        self.policy = replace(self.policy, delay_seconds=delay_seconds, chunk_bytes=chunk_bytes)

    def set_content_type(self, content_type: Optional[str] = None):
        """Fixed Content-Type; None probes the file."""
        self.policy = replace(self.policy, content_type=content_type or None)

    # === Sending ===

    async def send(self, path: Union[str, Path], exchange: HTTPExchange,
                   with_disposition: bool = True,
                   on_complete: Optional[CompletionCallback] = None) -> TransferResult:
        """
        Stream a file to the client of ``exchange``.

        Args:
            path: File to send
            exchange: Request/response pair of the host
            with_disposition: Send a Content-Disposition attachment header
            on_complete: Called once when the end of the file was sent

        Returns:
            TransferResult describing how the transfer ended

        Raises:
            FileNotReadable: path missing or unreadable
            RangeNotSatisfiable: Range header outside the file
            OpenFailed: file could not be opened
        """
        policy = self.policy
        descriptor = FileDescriptor.from_path(path)
        window = parse_range(exchange.range_header, descriptor.size)

        content_type = policy.content_type or await asyncio.to_thread(self.probe.probe, descriptor.path)

        try:
            handle = await aiofiles.open(descriptor.path, 'rb')
        except OSError as e:
            raise OpenFailed(descriptor.path, e.strerror or str(e)) from e

        try:
            exchange.disable_output_buffering()
            exchange.disable_compression()

            head = build_response_head(
                descriptor,
                window,
                content_type,
                disposition_name=policy.disposition_name,
                with_disposition=with_disposition,
            )
            logger.debug(
                f"Sending {descriptor.name} [{window.start}-{window.end}] "
                f"status={head.status} length={head.content_length}"
            )

            try:
                await exchange.start(head)
            except ClientDisconnected:
                result = TransferResult(content_length=head.content_length,
                                        state=TransferState.DISCONNECTED)
            else:
                transfer = ThrottledTransfer(exchange, policy, sleep=self._sleep)
                result = await transfer.run(
                    handle,
                    start=window.start,
                    content_length=head.content_length,
                    file_size=descriptor.size,
                    on_complete=on_complete,
                )
        finally:
            await handle.close()

        logger.info(
            f"{descriptor.name}: {result.state.value}, {result.bytes_sent:,} bytes "
            f"in {result.elapsed_seconds:.2f}s"
        )
        return result
