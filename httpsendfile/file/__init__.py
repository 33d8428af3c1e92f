"""
File Module - Metadata and Content-Type Detection

This module handles the filesystem side of a transfer.
"""

from .descriptor import FileDescriptor, is_readable
from .probe import (
    ContentTypeProbe, ProbeStrategy, UNKNOWN_TYPE,
    sniff_with_libmagic, sniff_image_header, guess_from_extension,
)

__all__ = [
    'FileDescriptor',
    'is_readable',
    'ContentTypeProbe',
    'ProbeStrategy',
    'UNKNOWN_TYPE',
    'sniff_with_libmagic',
    'sniff_image_header',
    'guess_from_extension',
]
