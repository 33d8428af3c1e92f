"""
Transfer Policy

Design Decision: Throttle Defaults
==================================

| Chunk   | Delay  | Effective rate |
|---------|--------|----------------|
| 40KB    | 0.1s   | ~400 KB/s      |
| 40KB    | 0s     | unthrottled    |
| 256KB   | 0.1s   | ~2.5 MB/s      |

Decision: 40KB chunks every 0.1s
- Keeps a single download from saturating a small uplink
- Small enough that a disconnect is noticed within one chunk
"""

from dataclasses import dataclass
from typing import Optional

DEFAULT_CHUNK_BYTES = 40960
DEFAULT_DELAY_SECONDS = 0.1


@dataclass(frozen=True)
class TransferPolicy:
    """
    How a file is sent.

    Frozen: a send keeps the policy it started with even if the
    streamer is reconfigured while the transfer runs.
    """
    disposition_name: Optional[str] = None
    chunk_bytes: int = DEFAULT_CHUNK_BYTES
    delay_seconds: float = DEFAULT_DELAY_SECONDS
    content_type: Optional[str] = None

    def __post_init__(self):
        if self.chunk_bytes <= 0:
            raise ValueError(f"chunk_bytes must be positive, got {self.chunk_bytes}")
        if self.delay_seconds < 0:
            raise ValueError(f"delay_seconds must not be negative, got {self.delay_seconds}")

    @property
    def max_bytes_per_sec(self) -> Optional[float]:
        """Upper bound on the transfer rate, None when unthrottled."""
        if self.delay_seconds == 0:
            return None
        return self.chunk_bytes / self.delay_seconds

    def to_dict(self) -> dict:
        return {
            'disposition_name': self.disposition_name,
            'chunk_bytes': self.chunk_bytes,
            'delay_seconds': self.delay_seconds,
            'content_type': self.content_type,
        }
