# ndexport/descriptor.py
"""
Immutable element type descriptors.

A descriptor describes one element of a buffer: a scalar kind with its byte
order and size, or a record made of named fields at fixed offsets. The
format string of a descriptor is computed once, on first request, and then
shared by every buffer that uses the descriptor.
"""
import ctypes
import logging
import threading
from typing import Any, Iterable, Optional, Sequence, Tuple, Union

from .types import ByteOrder, ElementKind
from .dataclasses import FieldInfo
from .exceptions import DescriptorError
from ._internal import format_encoder

logger = logging.getLogger(__name__)

# Platform widths of the fixed-size kinds.
_NATIVE_SIZES: dict[ElementKind, int] = {
    ElementKind.BOOL: 1,
    ElementKind.BYTE: 1,
    ElementKind.UBYTE: 1,
    ElementKind.SHORT: ctypes.sizeof(ctypes.c_short),
    ElementKind.USHORT: ctypes.sizeof(ctypes.c_ushort),
    ElementKind.INT: ctypes.sizeof(ctypes.c_int),
    ElementKind.UINT: ctypes.sizeof(ctypes.c_uint),
    ElementKind.LONG: ctypes.sizeof(ctypes.c_long),
    ElementKind.ULONG: ctypes.sizeof(ctypes.c_ulong),
    ElementKind.LONGLONG: ctypes.sizeof(ctypes.c_longlong),
    ElementKind.ULONGLONG: ctypes.sizeof(ctypes.c_ulonglong),
    ElementKind.HALF: 2,
    ElementKind.FLOAT: ctypes.sizeof(ctypes.c_float),
    ElementKind.DOUBLE: ctypes.sizeof(ctypes.c_double),
    ElementKind.LONGDOUBLE: ctypes.sizeof(ctypes.c_longdouble),
    ElementKind.CFLOAT: 2 * ctypes.sizeof(ctypes.c_float),
    ElementKind.CDOUBLE: 2 * ctypes.sizeof(ctypes.c_double),
    ElementKind.CLONGDOUBLE: 2 * ctypes.sizeof(ctypes.c_longdouble),
    ElementKind.OBJECT: ctypes.sizeof(ctypes.c_void_p),
    ElementKind.DATETIME: 8,
    ElementKind.TIMEDELTA: 8,
}

# Kinds for which byte order carries no meaning.
_ORDERLESS_KINDS = frozenset({
    ElementKind.BOOL,
    ElementKind.BYTE,
    ElementKind.UBYTE,
    ElementKind.STRING,
    ElementKind.OBJECT,
    ElementKind.VOID,
})

FieldSpec = Union[FieldInfo, Tuple[str, int, "ElementDescriptor"]]


class ElementDescriptor:
    """
    Describes the type and byte layout of a single buffer element.

    Instances are immutable once constructed. Build them through the
    `scalar`, `record`, `subarray` and `from_numpy` constructors rather than
    calling the class directly.
    """
    __slots__ = (
        "_kind", "_byteorder", "_itemsize", "_fields", "_is_record", "_subarray_shape",
        "_format", "_format_lock",
    )

    def __init__(
        self,
        kind: ElementKind,
        itemsize: int,
        *,
        byteorder: ByteOrder = ByteOrder.DEFAULT,
        fields: Iterable[FieldSpec] = (),
        record: bool = False,
        subarray_shape: Optional[Tuple[int, ...]] = None,
    ):
        if itemsize < 0:
            raise DescriptorError(f"Item size must be non-negative, got {itemsize}.")
        kind = ElementKind(kind)
        byteorder = ByteOrder(byteorder)
        if kind in _ORDERLESS_KINDS or itemsize == 1:
            byteorder = ByteOrder.NOT_APPLICABLE

        self._kind = kind
        self._byteorder = byteorder
        self._itemsize = itemsize
        self._fields = _validate_fields(fields, itemsize)
        self._is_record = bool(record or self._fields)
        self._subarray_shape = None if subarray_shape is None else tuple(int(n) for n in subarray_shape)
        self._format: Optional[str] = None
        self._format_lock = threading.Lock()

        if self._is_record and kind != ElementKind.VOID:
            raise DescriptorError("Only VOID descriptors can have record fields.")

    # --- Constructors ---

    @classmethod
    def scalar(
        cls,
        kind: ElementKind,
        itemsize: Optional[int] = None,
        byteorder: ByteOrder = ByteOrder.DEFAULT,
    ) -> "ElementDescriptor":
        """
        Creates a scalar descriptor.

        Args:
            kind: The element kind.
            itemsize: Size in bytes. Defaults to the platform width of the
                kind; required for STRING, UNICODE and VOID.
            byteorder: Declared byte order. Ignored for order-irrelevant kinds.
        """
        if itemsize is None:
            try:
                itemsize = _NATIVE_SIZES[ElementKind(kind)]
            except KeyError:
                raise DescriptorError(
                    f"Kind {ElementKind(kind).name} has no fixed width; pass itemsize explicitly."
                ) from None
        return cls(kind, itemsize, byteorder=byteorder)

    @classmethod
    def record(
        cls,
        fields: Sequence[FieldSpec],
        itemsize: Optional[int] = None,
    ) -> "ElementDescriptor":
        """
        Creates a record descriptor from ``(name, offset, descriptor)`` triples.

        The item size defaults to the end of the last field.
        """
        infos = [_as_field_info(f) for f in fields]
        if itemsize is None:
            itemsize = max((f.end for f in infos), default=0)
        return cls(ElementKind.VOID, itemsize, fields=infos, record=True)

    @classmethod
    def subarray(cls, base: "ElementDescriptor", shape: Sequence[int]) -> "ElementDescriptor":
        """Creates a fixed-shape sub-array of ``base`` elements."""
        count = 1
        for n in shape:
            if n < 0:
                raise DescriptorError(f"Sub-array extents must be non-negative, got {tuple(shape)}.")
            count *= n
        return cls(ElementKind.VOID, base.itemsize * count, subarray_shape=tuple(shape))

    @classmethod
    def from_numpy(cls, dtype: Any) -> "ElementDescriptor":
        """Creates a descriptor equivalent to a NumPy dtype."""
        from ._internal import numpy_utils
        return numpy_utils.descriptor_from_dtype(dtype)

    # --- Attributes ---

    @property
    def kind(self) -> ElementKind:
        return self._kind

    @property
    def byteorder(self) -> ByteOrder:
        return self._byteorder

    @property
    def itemsize(self) -> int:
        return self._itemsize

    @property
    def fields(self) -> Tuple[FieldInfo, ...]:
        """Record fields in ascending offset order; empty for scalars."""
        return self._fields

    @property
    def subarray_shape(self) -> Optional[Tuple[int, ...]]:
        return self._subarray_shape

    def is_record(self) -> bool:
        return self._is_record

    def has_subarray_shape(self) -> bool:
        return self._subarray_shape is not None

    @property
    def format(self) -> str:
        """
        The format string of this descriptor.

        Computed on first access and cached on the descriptor. Errors are not
        cached: a descriptor that cannot be encoded raises on every access.

        Raises:
            FormatError: If the descriptor cannot be expressed in the grammar.
            AllocationFailureError: If building the string ran out of memory.
        """
        fmt = self._format
        if fmt is not None:
            return fmt
        with self._format_lock:
            if self._format is None:
                self._format = format_encoder.encode(self)
                logger.debug("Published format %r for %r", self._format, self)
            return self._format

    def __repr__(self) -> str:
        if self._subarray_shape is not None:
            return f"ElementDescriptor(subarray shape={self._subarray_shape}, itemsize={self._itemsize})"
        if self._is_record:
            names = ", ".join(f"{f.name}@{f.offset}" for f in self._fields)
            return f"ElementDescriptor(record [{names}], itemsize={self._itemsize})"
        order = self._byteorder.value or "default"
        return f"ElementDescriptor({self._kind.name}, itemsize={self._itemsize}, byteorder={order!r})"


def _as_field_info(spec: FieldSpec) -> FieldInfo:
    if isinstance(spec, FieldInfo):
        return spec
    try:
        name, offset, descriptor = spec
    except (TypeError, ValueError):
        raise DescriptorError(
            f"Record fields must be (name, offset, descriptor) triples, got {spec!r}."
        ) from None
    if not isinstance(descriptor, ElementDescriptor):
        raise DescriptorError(f"Field {name!r} does not carry an ElementDescriptor.")
    return FieldInfo(name=name, offset=int(offset), descriptor=descriptor)


def _validate_fields(fields: Iterable[FieldSpec], itemsize: int) -> Tuple[FieldInfo, ...]:
    """Checks ordering, overlap, naming and bounds of record fields."""
    infos = tuple(_as_field_info(f) for f in fields)
    seen: set[str] = set()
    previous: Optional[FieldInfo] = None
    for info in infos:
        if not isinstance(info.name, str):
            raise DescriptorError(f"Field names must be strings, got {info.name!r}.")
        if info.name in seen:
            raise DescriptorError(f"Duplicate field name {info.name!r}.")
        seen.add(info.name)
        if info.offset < 0:
            raise DescriptorError(f"Field {info.name!r} has negative offset {info.offset}.")
        if previous is not None:
            if info.offset < previous.offset:
                raise DescriptorError(
                    f"Fields must be listed in ascending offset order: "
                    f"{info.name!r}@{info.offset} follows {previous.name!r}@{previous.offset}."
                )
            if info.offset < previous.end:
                raise DescriptorError(
                    f"Field {info.name!r}@{info.offset} overlaps {previous.name!r} "
                    f"which ends at {previous.end}."
                )
        previous = info
    if previous is not None and itemsize < previous.end:
        raise DescriptorError(
            f"Record item size {itemsize} is smaller than the end of its last field ({previous.end})."
        )
    return infos
