"""
Content-Type Probe

Design Decision: MIME Detection
===============================

Options Considered:
1. Extension lookup only (mimetypes)
   - Always available, but trusts the file name

2. libmagic content sniffing (python-magic)
   - Looks at the bytes, but needs the libmagic shared library

3. Image header sniffing (Pillow)
   - Only images, but works without libmagic

Decision: Ordered strategies, first answer wins
- libmagic first, then image headers, then the extension
- A strategy answers None when it has nothing to say
- The list is injectable so tests do not depend on host libraries
"""

import logging
import mimetypes
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

UNKNOWN_TYPE = "application/octet-stream"

# A strategy returns a MIME type or None
ProbeStrategy = Callable[[Path], Optional[str]]


def sniff_with_libmagic(path: Path) -> Optional[str]:
    """Ask libmagic for the MIME type of the file contents."""
    try:
        import magic
    except ImportError as e:
        # python-magic raises ImportError when libmagic itself is missing
        logger.debug(f"libmagic unavailable: {e}")
        return None

    try:
        mime_type = magic.from_file(str(path), mime=True)
    except (magic.MagicException, OSError) as e:
        logger.debug(f"libmagic failed on {path}: {e}")
        return None

    # inode/x-empty, inode/directory, ... describe the inode, not the data
    if not mime_type or mime_type.startswith('inode/'):
        return None
    return mime_type


def sniff_image_header(path: Path) -> Optional[str]:
    """Identify image files from their header bytes."""
    try:
        with Image.open(path) as img:
            return Image.MIME.get(img.format or '')
    except (UnidentifiedImageError, OSError):
        return None


def guess_from_extension(path: Path) -> Optional[str]:
    """Guess MIME type from the file extension."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


DEFAULT_STRATEGIES: Sequence[ProbeStrategy] = (
    sniff_with_libmagic,
    sniff_image_header,
    guess_from_extension,
)


class ContentTypeProbe:
    """
    Best-effort MIME type detection.

    Tries each strategy in order and returns the first non-empty answer,
    or UNKNOWN_TYPE when none of them recognise the file.
    """

    def __init__(self, strategies: Optional[Iterable[ProbeStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else list(DEFAULT_STRATEGIES)

    def probe(self, path: Path) -> str:
        path = Path(path)
        for strategy in self.strategies:
            mime_type = strategy(path)
            if mime_type:
                logger.debug(f"{getattr(strategy, '__name__', strategy)} -> {mime_type} for {path.name}")
                return mime_type
        return UNKNOWN_TYPE
