# ndexport/cache.py
"""Per-buffer cache of the shape/strides handed out with exported views."""

import logging
from typing import TYPE_CHECKING, Optional

from .dataclasses import LayoutSnapshot
from .exceptions import AllocationFailureError

if TYPE_CHECKING:
    from .abc import SourceBuffer

logger = logging.getLogger(__name__)


class ViewCache:
    """
    Holds the last LayoutSnapshot computed for one source buffer.

    `refresh` returns the cached snapshot while the buffer's layout is
    unchanged, so repeated exports share one snapshot object. When the layout
    changes a new snapshot replaces the old one; views that still hold the
    old snapshot keep it alive.
    """
    __slots__ = ("_snapshot",)

    def __init__(self) -> None:
        self._snapshot: Optional[LayoutSnapshot] = None

    @property
    def snapshot(self) -> Optional[LayoutSnapshot]:
        """The current snapshot, or None if none was computed yet."""
        return self._snapshot

    def refresh(self, buffer: "SourceBuffer") -> LayoutSnapshot:
        """
        Returns a snapshot matching the buffer's current layout.

        Raises:
            AllocationFailureError: If a new snapshot could not be built. The
                previous snapshot stays in place.
        """
        cached = self._snapshot
        ndim = buffer.dimension_count()

        if cached is not None and cached.ndim == ndim:
            for k in range(ndim):
                if cached.shape[k] != buffer.extent_of(k) or cached.strides[k] != buffer.stride_of(k):
                    break
            else:
                return cached

        try:
            shape = tuple(buffer.extent_of(k) for k in range(ndim))
            strides = tuple(buffer.stride_of(k) for k in range(ndim))
            snapshot = LayoutSnapshot(shape=shape, strides=strides)
        except MemoryError as e:
            raise AllocationFailureError("memory allocation failed while caching buffer layout") from e

        self._snapshot = snapshot
        logger.debug("Rebuilt layout snapshot: shape=%s strides=%s", shape, strides)
        return snapshot

    def clear(self) -> None:
        """Drops the cached snapshot."""
        self._snapshot = None
