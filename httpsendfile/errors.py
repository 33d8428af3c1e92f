"""
Send File Errors

Everything that can stop a transfer before the first header goes out
is raised as a SendFileError subclass so hosts can map it to a status
code. A client going away mid-stream is not an error for the caller of
FileStreamer.send; ClientDisconnected only travels from an exchange to
the transfer loop.
"""

from pathlib import Path
from typing import Union


class SendFileError(Exception):
    """Base class for send file failures."""


class FileNotReadable(SendFileError):
    """The path is missing, not a regular file, or not readable."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        super().__init__(f"File not found or inaccessible: {self.path}")


class OpenFailed(SendFileError):
    """The file passed the readability check but could not be opened."""

    def __init__(self, path: Union[str, Path], reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Can not open file: {self.path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class RangeNotSatisfiable(SendFileError):
    """The requested byte range does not overlap the file."""

    def __init__(self, size: int, range_header: str = ""):
        self.size = size
        self.range_header = range_header
        super().__init__(f"Range {range_header!r} not satisfiable for {size} bytes")

    @property
    def content_range(self) -> str:
        """Value for the Content-Range header of a 416 response."""
        return f"bytes */{self.size}"


class ClientDisconnected(SendFileError):
    """Raised by an exchange when the peer closed the connection."""
