"""
Range Header Parser

Design Decision: Range Support
==============================

Options Considered:
1. Full RFC 9110 ranges (suffix ranges, multipart/byteranges replies)
   - Complete, but multipart bodies need a boundary writer
   - Download managers rarely ask for more than one range

2. Single range, first one wins
   - What resumable downloads actually send ("bytes=N-")
   - One Content-Range header, one contiguous body

Decision: Single range, first one wins
- "bytes=A-B,C-D" is served as "bytes=A-B"
- An empty start is read as 0, so "bytes=-500" means "0-500",
  not "the last 500 bytes"
- An empty or zero end means "to the last byte", so "bytes=0-0"
  returns the whole file with status 206

Malformed Headers:
- No "=", a unit other than "bytes", or non-numeric positions:
  the header is ignored and the whole file is sent (200)
- End past the last byte: clamped to size - 1
- Start past the end (or past the file): RangeNotSatisfiable (416)
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..errors import RangeNotSatisfiable

logger = logging.getLogger(__name__)

RANGE_UNIT = 'bytes'


@dataclass(frozen=True)
class RangeWindow:
    """
    Inclusive byte interval of the file to send.

    For a non-empty file 0 <= start <= end < size holds. The full
    window of an empty file is [0, -1], which has length 0.
    """
    start: int
    end: int
    is_partial: bool = False

    @property
    def length(self) -> int:
        """Number of bytes in the window."""
        return self.end - self.start + 1

    def content_range(self, size: int) -> str:
        """Content-Range value for this window."""
        return f"{RANGE_UNIT} {self.start}-{self.end}/{size}"

    def to_dict(self) -> dict:
        return {
            'start': self.start,
            'end': self.end,
            'length': self.length,
            'partial': self.is_partial,
        }


def full_window(size: int) -> RangeWindow:
    """Window covering the whole file."""
    return RangeWindow(start=0, end=size - 1, is_partial=False)


def _parse_position(token: str) -> Optional[int]:
    """Parse one side of "START-END"; None when the side is empty."""
    token = token.strip()
    if not token:
        return None
    if not all(c in '0123456789' for c in token):
        raise ValueError(f"Invalid range position: {token!r}")
    return int(token)


def parse_range(range_header: Optional[str], size: int) -> RangeWindow:
    """
    Interpret a Range header against a file of ``size`` bytes.

    Args:
        range_header: Raw header value, e.g. "bytes=100-199", or None
        size: Total file size in bytes

    Returns:
        RangeWindow to stream

    Raises:
        RangeNotSatisfiable: if the range does not overlap the file
    """
    if not range_header:
        return full_window(size)

    unit, sep, ranges = range_header.partition('=')
    if not sep or unit.strip().lower() != RANGE_UNIT:
        logger.debug(f"Ignoring range header with unknown unit: {range_header!r}")
        return full_window(size)

    # Only the first range of a list is honoured
    first = ranges.split(',', 1)[0]
    start_token, _, end_token = first.partition('-')

    try:
        start = _parse_position(start_token)
        end = _parse_position(end_token)
    except ValueError as e:
        logger.debug(f"Ignoring malformed range header {range_header!r}: {e}")
        return full_window(size)

    start = start or 0
    if not end:
        end = size - 1

    end = min(end, size - 1)
    if start >= size or start > end:
        raise RangeNotSatisfiable(size, range_header)

    return RangeWindow(start=start, end=end, is_partial=True)
