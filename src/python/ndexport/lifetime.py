# ndexport/lifetime.py
"""Outstanding-view accounting for source buffers."""

import logging

from .exceptions import BufferLifetimeError

logger = logging.getLogger(__name__)


class LifetimeGuard:
    """
    Counts the views that currently pin a source buffer.

    Every successful export acquires once and every release gives that
    acquisition back. A buffer may only be destroyed when the count is zero.
    The guard does no locking: callers sharing a buffer between threads must
    serialise export and release themselves.
    """
    __slots__ = ("_count",)

    def __init__(self) -> None:
        self._count = 0

    @property
    def count(self) -> int:
        """The number of views currently outstanding."""
        return self._count

    def acquire(self) -> None:
        self._count += 1

    def release(self) -> None:
        if self._count <= 0:
            raise BufferLifetimeError("release called with no outstanding views")
        self._count -= 1

    def check_destroyable(self) -> None:
        """
        Raises:
            BufferLifetimeError: If any view still references the buffer.
        """
        if self._count:
            logger.critical(
                "Refusing to destroy a buffer with %d outstanding view(s)", self._count
            )
            raise BufferLifetimeError(
                f"cannot destroy a buffer with {self._count} outstanding view(s)"
            )
