"""
Throttled Transfer Loop

Design Decision: Throttling
===========================

Options Considered:
1. Token bucket
   - Smooth rate, supports bursts
   - Needs shared accounting and a clock per transfer

2. Fixed delay after every chunk
   - Rate is simply chunk_bytes / delay_seconds
   - Sleeping between chunks also gives the event loop to other requests

Decision: Fixed delay after every chunk
- asyncio.sleep(delay) after each write, even when delay is 0,
  so a fast disk never starves other connections

Loop Flow:
1. Stop if the file is exhausted (callback fires)
   or a read comes back short of the window (truncated)
2. Stop if the client disconnected
3. Stop if the window has been sent
4. Read min(chunk_bytes, remaining) bytes, write, flush, sleep
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from ..errors import ClientDisconnected
from .exchange import HTTPExchange
from .policy import TransferPolicy

logger = logging.getLogger(__name__)

# Completion hook, called with no arguments once the file end is sent
CompletionCallback = Callable[[], None]

SleepFunction = Callable[[float], Awaitable[Any]]


class TransferState(Enum):
    """Why a transfer stopped."""
    COMPLETED = "completed"              # end of file reached
    DISCONNECTED = "disconnected"        # client went away
    WINDOW_EXHAUSTED = "window_exhausted"  # range sent, file continues
    TRUNCATED = "truncated"              # file ended before the window did


@dataclass
class TransferResult:
    """Outcome of one send."""
    content_length: int
    state: Optional[TransferState] = None
    bytes_sent: int = 0
    chunks_sent: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None

    @property
    def completed(self) -> bool:
        return self.state is TransferState.COMPLETED

    @property
    def elapsed_seconds(self) -> float:
        """Time from start to end (or now, while running)."""
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time

    @property
    def speed_bytes_per_sec(self) -> float:
        elapsed = self.elapsed_seconds
        if elapsed == 0:
            return 0
        return self.bytes_sent / elapsed

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'state': self.state.value if self.state else None,
            'content_length': self.content_length,
            'bytes_sent': self.bytes_sent,
            'chunks_sent': self.chunks_sent,
            'elapsed_seconds': self.elapsed_seconds,
            'speed_bytes_per_sec': self.speed_bytes_per_sec,
        }


class ThrottledTransfer:
    """
    Streams a byte window of an open file to an exchange.

    The file handle is owned by the caller; this class only seeks and
    reads. Exactly ``content_length`` bytes are written unless the
    file ends early or the client disconnects.
    """

    def __init__(self, exchange: HTTPExchange, policy: TransferPolicy,
                 sleep: SleepFunction = asyncio.sleep):
        self.exchange = exchange
        self.policy = policy
        self._sleep = sleep

    async def run(self, handle, start: int, content_length: int, file_size: int,
                  on_complete: Optional[CompletionCallback] = None) -> TransferResult:
        """
        Send ``content_length`` bytes starting at ``start``.

        Args:
            handle: Open aiofiles binary handle
            start: First byte offset
            content_length: Bytes to send
            file_size: Total size, used to detect the end of file
            on_complete: Called once, after the last write, if the end
                of the file was reached

        Returns:
            TransferResult with the terminal state
        """
        result = TransferResult(content_length=content_length)
        chunk_bytes = self.policy.chunk_bytes
        delay = self.policy.delay_seconds

        if start > 0:
            await handle.seek(start)
        position = start
        at_eof = position >= file_size

        try:
            while True:
                if at_eof:
                    result.state = TransferState.COMPLETED
                    break
                if await self.exchange.is_disconnected():
                    result.state = TransferState.DISCONNECTED
                    break
                if result.bytes_sent >= content_length:
                    result.state = TransferState.WINDOW_EXHAUSTED
                    break

                data = await handle.read(min(chunk_bytes, content_length - result.bytes_sent))
                if not data:
                    # File shrank underneath us; Content-Length can no longer be met
                    result.state = TransferState.TRUNCATED
                    break

                await self.exchange.write(data)
                await self.exchange.flush()

                result.bytes_sent += len(data)
                result.chunks_sent += 1
                position += len(data)
                at_eof = position >= file_size

                await self._sleep(delay)
        except ClientDisconnected:
            result.state = TransferState.DISCONNECTED

        result.end_time = time.time()

        if result.state is TransferState.DISCONNECTED:
            logger.info(f"Client disconnected after {result.bytes_sent:,} of {content_length:,} bytes")
        elif result.state is TransferState.TRUNCATED:
            logger.warning(f"File ended after {result.bytes_sent:,} of {content_length:,} bytes")
        elif result.completed and on_complete is not None:
            on_complete()

        return result
