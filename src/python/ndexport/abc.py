# ndexport/abc.py
"""Abstract Base Classes for the ndexport library."""

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cache import ViewCache
    from .descriptor import ElementDescriptor
    from .lifetime import LifetimeGuard


class SourceBuffer(abc.ABC):
    """
    The contract a buffer must fulfil to have views exported from it.

    Besides the layout queries below, a source buffer owns a `ViewCache`
    (``view_cache``) and a `LifetimeGuard` (``lifetime``) that the exporter
    uses on its behalf.
    """
    view_cache: "ViewCache"
    lifetime: "LifetimeGuard"

    @abc.abstractmethod
    def base_pointer(self) -> int:
        """Address of the first element."""
        raise NotImplementedError

    @abc.abstractmethod
    def byte_length(self) -> int:
        """Number of elements times the item size."""
        raise NotImplementedError

    @abc.abstractmethod
    def item_size(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def is_read_only(self) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def dimension_count(self) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def extent_of(self, dim: int) -> int:
        raise NotImplementedError

    @abc.abstractmethod
    def stride_of(self, dim: int) -> int:
        """Byte step between consecutive elements along ``dim``."""
        raise NotImplementedError

    @abc.abstractmethod
    def is_row_major_contiguous(self) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    def is_column_major_contiguous(self) -> bool:
        raise NotImplementedError

    def is_single_segment(self) -> bool:
        """True if the elements occupy one unbroken run of memory in some order."""
        return self.is_row_major_contiguous() or self.is_column_major_contiguous()

    @abc.abstractmethod
    def element_descriptor(self) -> "ElementDescriptor":
        raise NotImplementedError

    def check_alive(self) -> None:
        """Hook for buffers that can be destroyed; raises if this one was."""


class ReleasableBase(abc.ABC):
    """Abstract base class for handles that hold a resource until released."""

    @abc.abstractmethod
    def release(self) -> None:
        """
        Gives the held resource back.
        Subsequent operations on the object will raise an error.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def released(self) -> bool:
        """Returns True if the handle was released."""
        raise NotImplementedError

    def __enter__(self) -> "ReleasableBase":
        if self.released:
            raise ValueError("Cannot enter context with a released handle.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if not self.released:
            self.release()
