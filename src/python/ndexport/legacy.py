# ndexport/legacy.py
"""
Deprecated single-segment buffer accessors.

These predate view export and hand out a bare address and length without
pinning the buffer. They rely on the same single-segment check as
`export_view` and add no logic of their own.
"""
from typing import Tuple

from .abc import SourceBuffer
from .exceptions import NotContiguousError, NotWritableError


def segment_count(buffer: SourceBuffer) -> Tuple[int, int]:
    """Returns ``(segments, total_length)``: ``(1, nbytes)`` or ``(0, 0)``."""
    buffer.check_alive()
    if buffer.is_single_segment():
        return 1, buffer.byte_length()
    return 0, 0


def read_buffer(buffer: SourceBuffer, segment: int = 0) -> Tuple[int, int]:
    """
    Returns ``(address, length)`` of the buffer's only segment.

    Raises:
        ValueError: If ``segment`` is not 0.
        NotContiguousError: If the buffer is not a single segment.
    """
    buffer.check_alive()
    if segment != 0:
        raise ValueError("accessing non-existing buffer segment")
    if not buffer.is_single_segment():
        raise NotContiguousError("buffer is not a single segment")
    return buffer.base_pointer(), buffer.byte_length()


def write_buffer(buffer: SourceBuffer, segment: int = 0) -> Tuple[int, int]:
    """
    Like `read_buffer`, for buffers that accept writes.

    Raises:
        NotWritableError: If the buffer is read-only.
    """
    buffer.check_alive()
    if buffer.is_read_only():
        raise NotWritableError("buffer cannot be accessed as a writeable buffer")
    return read_buffer(buffer, segment)
