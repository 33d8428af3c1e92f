"""
Transfer Module - Headers, Exchange, and Throttled Streaming

Handles writing a file window to an HTTP client.
"""

from .policy import TransferPolicy, DEFAULT_CHUNK_BYTES, DEFAULT_DELAY_SECONDS
from .headers import ResponseHead, build_response_head, content_disposition, EXPIRES_IN_THE_PAST
from .exchange import HTTPExchange, ASGIExchange
from .loop import (
    ThrottledTransfer, TransferResult, TransferState, CompletionCallback,
)

__all__ = [
    'TransferPolicy',
    'DEFAULT_CHUNK_BYTES',
    'DEFAULT_DELAY_SECONDS',
    'ResponseHead',
    'build_response_head',
    'content_disposition',
    'EXPIRES_IN_THE_PAST',
    'HTTPExchange',
    'ASGIExchange',
    'ThrottledTransfer',
    'TransferResult',
    'TransferState',
    'CompletionCallback',
]
