"""
HTTP SendFile

Streams files to HTTP clients with single byte-range support,
throttling, content-type detection, and an end-of-file callback.
"""

from .errors import (
    SendFileError, FileNotReadable, OpenFailed, RangeNotSatisfiable, ClientDisconnected,
)
from .ranges import RangeWindow, parse_range
from .file import ContentTypeProbe, FileDescriptor
from .transfer import (
    TransferPolicy, TransferResult, TransferState, HTTPExchange, ASGIExchange,
)
from .streamer import FileStreamer

__all__ = [
    'SendFileError',
    'FileNotReadable',
    'OpenFailed',
    'RangeNotSatisfiable',
    'ClientDisconnected',
    'RangeWindow',
    'parse_range',
    'ContentTypeProbe',
    'FileDescriptor',
    'TransferPolicy',
    'TransferResult',
    'TransferState',
    'HTTPExchange',
    'ASGIExchange',
    'FileStreamer',
]
