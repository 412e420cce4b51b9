# ndexport/buffer.py
"""A strided, typed source buffer over caller-provided memory."""

import logging
from typing import Any, Optional, Sequence, Tuple, Union

import numpy as np

from .abc import SourceBuffer
from .cache import ViewCache
from .descriptor import ElementDescriptor
from .lifetime import LifetimeGuard
from ._internal import layout, numpy_utils

logger = logging.getLogger(__name__)


class StridedBuffer(SourceBuffer):
    """
    A multi-dimensional, strided view of typed elements over a memory object.

    The memory may be any object exporting a contiguous buffer (``bytes``,
    ``bytearray``, ``mmap``, ...) or a NumPy array. The buffer keeps a
    reference to it until `destroy` is called, which is only allowed once no
    exported view remains.

    Usage:
        memory = bytearray(24)
        buf = StridedBuffer(memory, ElementDescriptor.scalar(ElementKind.INT), (2, 3))
        with export_view(buf, ViewFlags.RECORDS) as view:
            consume(view.buf, view.shape, view.strides, view.format)
        buf.destroy()
    """
    def __init__(
        self,
        memory: Any,
        descriptor: Union[ElementDescriptor, Any],
        shape: Sequence[int],
        strides: Optional[Sequence[int]] = None,
        *,
        offset: int = 0,
        readonly: Optional[bool] = None,
    ):
        """
        Args:
            memory: The object owning the bytes.
            descriptor: Element descriptor, or anything `np.dtype` accepts.
            shape: Extent of each dimension.
            strides: Byte step of each dimension. Defaults to row-major.
            offset: Byte offset of the first element from the start of memory.
            readonly: Forces a read-only buffer. Defaults to the memory's own
                writability; a writable buffer over read-only memory is refused.

        Raises:
            TypeError: If memory does not support the buffer protocol.
            ValueError: If the layout does not fit in memory or is malformed.
        """
        if not isinstance(descriptor, ElementDescriptor):
            descriptor = numpy_utils.descriptor_from_dtype(descriptor)

        (address, span_low, span_high), pin = numpy_utils.memory_span(memory)
        memory_readonly = numpy_utils.is_readonly_memory(memory)
        if readonly is None:
            readonly = memory_readonly
        elif not readonly and memory_readonly:
            raise ValueError("Cannot create a writable buffer over read-only memory.")

        self._memory = memory
        self._pin = pin
        self._descriptor = descriptor
        self._address = address
        self._offset = int(offset)
        self._span = (span_low, span_high)
        self._readonly = bool(readonly)
        self._destroyed = False

        self.view_cache = ViewCache()
        self.lifetime = LifetimeGuard()

        self._shape: Tuple[int, ...] = ()
        self._strides: Tuple[int, ...] = ()
        self.set_layout(shape, strides)

    @classmethod
    def from_numpy(cls, arr: np.ndarray) -> "StridedBuffer":
        """Wraps a NumPy array, sharing its memory, dtype and layout."""
        if not isinstance(arr, np.ndarray):
            raise TypeError(f"Expected a numpy.ndarray, got {type(arr).__name__}.")
        return cls(
            arr,
            numpy_utils.descriptor_from_dtype(arr.dtype),
            arr.shape,
            arr.strides,
            readonly=not arr.flags.writeable,
        )

    # --- Layout ---

    def set_layout(self, shape: Sequence[int], strides: Optional[Sequence[int]] = None) -> None:
        """
        Changes the shape and strides over the same memory.

        Views exported before the change keep the layout they were given.

        Raises:
            ValueError: If the new layout is malformed or exceeds the memory.
        """
        self.check_alive()
        shape = tuple(int(n) for n in shape)
        if any(n < 0 for n in shape):
            raise ValueError(f"Extents must be non-negative, got {shape}.")
        itemsize = self._descriptor.itemsize
        if strides is None:
            strides = layout.strides_for_shape(shape, itemsize)
        strides = tuple(int(s) for s in strides)
        if len(strides) != len(shape):
            raise ValueError(f"shape {shape} does not match strides {strides}")

        low, high = layout.strided_extent(shape, strides, itemsize)
        span_low, span_high = self._span
        if low != high and (self._offset + low < span_low or self._offset + high > span_high):
            raise ValueError(
                f"shape {shape} and strides {strides} at offset {self._offset} "
                f"exceed the memory span [{span_low}, {span_high})"
            )

        self._shape = shape
        self._strides = strides
        self._c_contiguous = layout.is_c_contiguous(shape, strides, itemsize)
        self._f_contiguous = layout.is_f_contiguous(shape, strides, itemsize)

    @property
    def shape(self) -> Tuple[int, ...]:
        return self._shape

    @property
    def strides(self) -> Tuple[int, ...]:
        return self._strides

    @property
    def ndim(self) -> int:
        return len(self._shape)

    @property
    def descriptor(self) -> ElementDescriptor:
        return self._descriptor

    @property
    def readonly(self) -> bool:
        return self.is_read_only()

    @property
    def nbytes(self) -> int:
        return self.byte_length()

    # --- SourceBuffer contract ---

    def base_pointer(self) -> int:
        self.check_alive()
        return self._address + self._offset

    def byte_length(self) -> int:
        return layout.element_count(self._shape) * self._descriptor.itemsize

    def item_size(self) -> int:
        return self._descriptor.itemsize

    def is_read_only(self) -> bool:
        """Forced read-only, or the memory itself stopped accepting writes."""
        if self._readonly:
            return True
        return self._memory is not None and numpy_utils.is_readonly_memory(self._memory)

    def dimension_count(self) -> int:
        return len(self._shape)

    def extent_of(self, dim: int) -> int:
        return self._shape[dim]

    def stride_of(self, dim: int) -> int:
        return self._strides[dim]

    def is_row_major_contiguous(self) -> bool:
        return self._c_contiguous

    def is_column_major_contiguous(self) -> bool:
        return self._f_contiguous

    def element_descriptor(self) -> ElementDescriptor:
        return self._descriptor

    # --- Lifetime ---

    def check_alive(self) -> None:
        if self._destroyed:
            raise ValueError("Operation attempted on a destroyed buffer.")

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def destroy(self) -> None:
        """
        Drops the memory reference and the layout cache.

        Calling it again is a no-op.

        Raises:
            BufferLifetimeError: If views exported from this buffer are still
                outstanding. Nothing is freed in that case.
        """
        if self._destroyed:
            return
        self.lifetime.check_destroyable()
        self.view_cache.clear()
        self._memory = None
        self._pin = None
        self._destroyed = True
        logger.debug("Destroyed buffer with shape %s", self._shape)

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else f"{self.lifetime.count} view(s)"
        return (
            f"StridedBuffer(shape={self._shape}, strides={self._strides}, "
            f"descriptor={self._descriptor!r}, readonly={self.is_read_only()}, {state})"
        )
