# ndexport/_internal/numpy_utils.py

"""
Internal utilities for interacting with NumPy.

This module handles the conversion of NumPy dtypes into element descriptors,
and the resolution of raw memory addresses for buffer-supporting objects.
"""

from typing import TYPE_CHECKING, Any, Tuple, TypeAlias
import numpy as np

from ..types import ByteOrder, ElementKind
from . import layout

if TYPE_CHECKING:
    from ..descriptor import ElementDescriptor

# (address, low, high): the base address and the byte range around it that
# the memory object owns.
MemorySpan: TypeAlias = Tuple[int, int, int]

# --- Mappings ---

# Maps NumPy byte-order characters to ByteOrder members.
_NP_BYTEORDER_TO_ORDER: dict[str, ByteOrder] = {
    "=": ByteOrder.NATIVE,
    "<": ByteOrder.LITTLE,
    ">": ByteOrder.BIG,
    "|": ByteOrder.NOT_APPLICABLE,
}

_SUPPORTED_NUMS = frozenset(int(k) for k in ElementKind)

# --- Functions ---

def descriptor_from_dtype(dtype: Any) -> "ElementDescriptor":
    """
    Builds an element descriptor equivalent to a NumPy dtype.

    Structured dtypes become records with fields sorted by offset; sub-array
    dtypes keep their shape so that encoding them fails as it should.

    Args:
        dtype: Anything `np.dtype` accepts.

    Returns:
        The corresponding ElementDescriptor.

    Raises:
        TypeError: If the dtype is not one of NumPy's builtin types.
        DescriptorError: If the structured dtype has overlapping fields.
    """
    from ..descriptor import ElementDescriptor

    dt = np.dtype(dtype)

    if dt.subdtype is not None:
        base, shape = dt.subdtype
        return ElementDescriptor.subarray(descriptor_from_dtype(base), shape)

    if dt.names is not None:
        fields = []
        for name in dt.names:
            field_dtype, offset = dt.fields[name][:2]
            fields.append((name, offset, descriptor_from_dtype(field_dtype)))
        fields.sort(key=lambda f: f[1])
        return ElementDescriptor.record(fields, itemsize=dt.itemsize)

    if dt.num not in _SUPPORTED_NUMS:
        raise TypeError(f"Unsupported NumPy dtype: '{dt}' (type number {dt.num}).")

    return ElementDescriptor(
        ElementKind(dt.num),
        dt.itemsize,
        byteorder=_NP_BYTEORDER_TO_ORDER[dt.byteorder],
    )

def memory_span(memory: Any) -> Tuple[MemorySpan, np.ndarray]:
    """
    Resolves the base address of a memory object and the bytes it covers.

    NumPy arrays may be strided, so their span is computed from their own
    shape and strides. Any other object must export a contiguous buffer.

    Returns:
        The span, and an array that holds a buffer export on the memory for
        as long as it is referenced. Keeping it alive stops resizable
        objects such as ``bytearray`` from moving their bytes.

    Raises:
        TypeError: If the object does not support the buffer protocol.
        ValueError: If its buffer is not contiguous.
    """
    if isinstance(memory, np.ndarray):
        address = memory.__array_interface__["data"][0]
        low, high = layout.strided_extent(memory.shape, memory.strides, memory.itemsize)
        return (address, low, high), memory

    raw = np.frombuffer(memory, dtype=np.uint8)
    return (raw.ctypes.data, 0, raw.nbytes), raw

def is_readonly_memory(memory: Any) -> bool:
    """True if the memory object refuses writes."""
    if isinstance(memory, np.ndarray):
        return not memory.flags.writeable
    with memoryview(memory) as mv:
        return mv.readonly
