"""
Response Header Builder

Builds the status line and header set sent before the first body
byte. Header names and the Expires date are kept exactly as download
clients have always seen them.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import quote

from ..file.descriptor import FileDescriptor
from ..ranges import RangeWindow

STATUS_OK = 200
STATUS_PARTIAL_CONTENT = 206

# Any date in the past makes the response stale on arrival
EXPIRES_IN_THE_PAST = 'Mon, 26 Jul 1997 05:00:00 GMT'


@dataclass
class ResponseHead:
    """Status, headers, and the number of body bytes that will follow."""
    status: int
    content_length: int
    headers: List[Tuple[str, str]] = field(default_factory=list)

    def get(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None


def content_disposition(name: str) -> str:
    """
    Attachment disposition for ``name``.

    Non-ASCII names get an RFC 5987 filename* parameter after an ASCII
    fallback, since header values must be latin-1 on the wire.
    """
    if name.isascii():
        return f'attachment; filename="{name}"'
    fallback = name.encode('ascii', 'replace').decode('ascii')
    return f'attachment; filename="{fallback}"; filename*=UTF-8\'\'{quote(name)}'


def build_response_head(descriptor: FileDescriptor,
                        window: RangeWindow,
                        content_type: str,
                        disposition_name: Optional[str] = None,
                        with_disposition: bool = True) -> ResponseHead:
    """
    Build the response head for sending ``window`` of ``descriptor``.

    Args:
        descriptor: File being sent
        window: Interpreted byte window
        content_type: Resolved MIME type
        disposition_name: Download name, defaults to the file's base name
        with_disposition: Whether to send Content-Disposition at all

    Returns:
        ResponseHead with status 206 for partial windows, 200 otherwise
    """
    headers = [('Content-Type', content_type)]

    if with_disposition:
        headers.append(('Content-Disposition', content_disposition(disposition_name or descriptor.name)))

    headers.append(('Accept-Ranges', 'bytes'))

    # Non-cacheable for every intermediate cache
    headers.append(('Cache-control', 'private'))
    headers.append(('Pragma', 'private'))
    headers.append(('Expires', EXPIRES_IN_THE_PAST))

    if window.is_partial:
        status = STATUS_PARTIAL_CONTENT
        content_length = window.length
        headers.append(('Content-Length', str(content_length)))
        headers.append(('Content-Range', window.content_range(descriptor.size)))
    else:
        status = STATUS_OK
        content_length = descriptor.size
        headers.append(('Content-Length', str(content_length)))

    return ResponseHead(status=status, content_length=content_length, headers=headers)
