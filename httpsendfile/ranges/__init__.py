"""
Ranges Module - Range Header Interpretation

Turns an optional HTTP Range header into the byte window to stream.
"""

from .parser import RangeWindow, parse_range, full_window

__all__ = [
    'RangeWindow',
    'parse_range',
    'full_window',
]
