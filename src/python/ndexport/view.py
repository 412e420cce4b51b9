# ndexport/view.py
"""The exported view handle."""

import ctypes
import logging
from typing import Optional, Tuple

from .abc import ReleasableBase, SourceBuffer
from .dataclasses import LayoutSnapshot
from .exceptions import NotContiguousError

logger = logging.getLogger(__name__)


class ViewRecord(ReleasableBase):
    """
    A borrowed, self-describing window onto a source buffer's memory.

    The record never owns memory. While it is unreleased it holds one
    acquisition on its source buffer, which prevents the buffer from being
    destroyed. Created by `export_view`; give it back with `release()` or by
    using it as a context manager.

    Attributes:
        buf (int): Address of the first element.
        len (int): Number of elements times the item size.
        itemsize (int): Size of one element in bytes.
        readonly (bool): Whether the consumer must not write through the view.
        format (str | None): Element format string, if it was requested.
        ndim (int): Number of dimensions; 0 when shape and strides were not
            requested from a single-segment buffer.
        shape, strides (tuple | None): Borrowed from the buffer's cached
            LayoutSnapshot, if requested.
        suboffsets: Always None; indirect layouts are not exported.
    """
    suboffsets = None

    def __init__(
        self,
        obj: SourceBuffer,
        *,
        buf: int,
        length: int,
        itemsize: int,
        readonly: bool,
        format: Optional[str],
        snapshot: Optional[LayoutSnapshot],
    ):
        self._obj: Optional[SourceBuffer] = obj
        self.buf = buf
        self.len = length
        self.itemsize = itemsize
        self.readonly = readonly
        self.format = format
        self.snapshot = snapshot
        self._single_segment = obj.is_single_segment()

    @property
    def obj(self) -> Optional[SourceBuffer]:
        """The source buffer, or None once released."""
        return self._obj

    @property
    def ndim(self) -> int:
        return 0 if self.snapshot is None else self.snapshot.ndim

    @property
    def shape(self) -> Optional[Tuple[int, ...]]:
        return None if self.snapshot is None else self.snapshot.shape

    @property
    def strides(self) -> Optional[Tuple[int, ...]]:
        return None if self.snapshot is None else self.snapshot.strides

    def tobytes(self) -> bytes:
        """
        Copies the viewed bytes of a single-segment export.

        Raises:
            ValueError: If the view was released.
            NotContiguousError: If the source was not a single segment.
        """
        if self._obj is None:
            raise ValueError("Operation attempted on a released view.")
        if not self._single_segment:
            raise NotContiguousError("view is not a single segment")
        if self.len == 0:
            return b""
        return ctypes.string_at(self.buf, self.len)

    def release(self) -> None:
        """
        Gives the view's pin on its source buffer back.

        Raises:
            ValueError: If the view was already released.
        """
        if self._obj is None:
            raise ValueError("View has already been released.")
        obj, self._obj = self._obj, None
        obj.lifetime.release()
        logger.debug("Released view at 0x%x (%d outstanding)", self.buf, obj.lifetime.count)

    @property
    def released(self) -> bool:
        return self._obj is None

    def __repr__(self) -> str:
        state = "released" if self._obj is None else "active"
        return (
            f"ViewRecord(buf=0x{self.buf:x}, len={self.len}, itemsize={self.itemsize}, "
            f"format={self.format!r}, shape={self.shape}, strides={self.strides}, "
            f"readonly={self.readonly}, {state})"
        )
