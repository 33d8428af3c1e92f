"""
File Descriptor

Metadata about the file being sent, taken from the filesystem at the
start of every send. Nothing here is cached between requests: a file
that grows or shrinks between two downloads is described afresh.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..errors import FileNotReadable


def is_readable(path: Path) -> bool:
    """True if path is a regular file the process may read."""
    try:
        return path.is_file() and os.access(path, os.R_OK)
    except OSError:
        return False


@dataclass
class FileDescriptor:
    """Size and name of a file about to be streamed."""
    path: Path
    size: int
    name: str

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> 'FileDescriptor':
        """
        Describe a readable file.

        Raises:
            FileNotReadable: if the path fails the readability check
        """
        path = Path(path)
        if not is_readable(path):
            raise FileNotReadable(path)

        try:
            size = path.stat().st_size
        except OSError:
            raise FileNotReadable(path)

        return cls(path=path, size=size, name=path.name)

    def to_dict(self) -> dict:
        return {
            'path': str(self.path),
            'size': self.size,
            'name': self.name,
        }
