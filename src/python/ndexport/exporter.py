# ndexport/exporter.py
"""
Export of views from source buffers.

`export_view` validates a request against the buffer's layout and flags and
builds a `ViewRecord`; `release_view` gives it back.
"""
import logging
from typing import Optional, Union

from .abc import SourceBuffer
from .dataclasses import LayoutSnapshot
from .exceptions import NotContiguousError, NotWritableError
from .types import ViewFlags
from .view import ViewRecord

logger = logging.getLogger(__name__)


def _requested(flags: ViewFlags, flag: ViewFlags) -> bool:
    return (flags & flag) == flag


def export_view(buffer: SourceBuffer, flags: Union[ViewFlags, int] = ViewFlags.SIMPLE) -> ViewRecord:
    """
    Exports a view of a source buffer.

    Args:
        buffer: The buffer to export.
        flags: The capabilities the consumer requires.

    Returns:
        A ViewRecord holding one pin on the buffer until released.

    Raises:
        NotContiguousError: The buffer lacks the requested contiguity, or is
            not a single segment and shape/strides were not requested.
        NotWritableError: Write access was requested on a read-only buffer.
        FormatError: The element type cannot be written as a format string.
        AllocationFailureError: A cache could not be grown.
    """
    buffer.check_alive()
    flags = ViewFlags(flags)

    if _requested(flags, ViewFlags.REQUIRE_ROW_MAJOR) and not buffer.is_row_major_contiguous():
        raise NotContiguousError("buffer is not C contiguous")
    if _requested(flags, ViewFlags.REQUIRE_COLUMN_MAJOR) and not buffer.is_column_major_contiguous():
        raise NotContiguousError("buffer is not Fortran contiguous")
    if _requested(flags, ViewFlags.REQUIRE_ANY_CONTIGUOUS) and not buffer.is_single_segment():
        raise NotContiguousError("buffer is not contiguous")
    if _requested(flags, ViewFlags.REQUIRE_WRITABLE) and buffer.is_read_only():
        raise NotWritableError("buffer is not writable")

    fmt: Optional[str] = None
    if _requested(flags, ViewFlags.REQUIRE_FORMAT):
        fmt = buffer.element_descriptor().format

    snapshot: Optional[LayoutSnapshot] = None
    if _requested(flags, ViewFlags.REQUIRE_SHAPE_STRIDES):
        snapshot = buffer.view_cache.refresh(buffer)
    elif not buffer.is_single_segment():
        raise NotContiguousError("buffer is not single-segment")

    view = ViewRecord(
        buffer,
        buf=buffer.base_pointer(),
        length=buffer.byte_length(),
        itemsize=buffer.item_size(),
        readonly=buffer.is_read_only(),
        format=fmt,
        snapshot=snapshot,
    )
    buffer.lifetime.acquire()
    logger.debug(
        "Exported view flags=%r ndim=%d format=%r (%d outstanding)",
        flags, view.ndim, fmt, buffer.lifetime.count,
    )
    return view


def release_view(view: ViewRecord) -> None:
    """Releases a view previously returned by `export_view`."""
    view.release()
