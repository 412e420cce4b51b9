# ndexport/_internal/format_encoder.py

"""
Translation of element descriptors into format strings.

The grammar is the struct-module style used by the buffer protocol:
an optional byte-order prefix, a type code, and ``T{...}`` records whose
fields are written as ``<padding><child>:<name>:``.

This module is pure: it never touches the descriptor's cached format.
`ElementDescriptor.format` is the memoised entry point.
"""
from typing import TYPE_CHECKING, List

from ..types import (
    ByteOrder,
    ElementKind,
    FIELD_NAME_ENCODING,
    FIELD_SEPARATOR,
    PADDING_CODE,
    RECORD_CLOSE,
    RECORD_OPEN,
    WIDE_CHAR_SIZE,
)
from ..exceptions import (
    AllocationFailureError,
    InvalidFieldNameError,
    InvalidWidthError,
    UnknownElementTypeError,
    UnsupportedLayoutError,
)

if TYPE_CHECKING:
    from ..descriptor import ElementDescriptor

# Fixed type codes of the scalar kinds.
_TYPE_CODES: dict[ElementKind, str] = {
    ElementKind.BYTE: "b",
    ElementKind.UBYTE: "B",
    ElementKind.SHORT: "h",
    ElementKind.USHORT: "H",
    ElementKind.INT: "i",
    ElementKind.UINT: "I",
    ElementKind.LONG: "l",
    ElementKind.ULONG: "L",
    ElementKind.LONGLONG: "q",
    ElementKind.ULONGLONG: "Q",
    ElementKind.FLOAT: "f",
    ElementKind.DOUBLE: "d",
    ElementKind.LONGDOUBLE: "g",
    ElementKind.CFLOAT: "Zf",
    ElementKind.CDOUBLE: "Zd",
    ElementKind.CLONGDOUBLE: "Zg",
    ElementKind.OBJECT: "O",
}

# Orders that are written as a prefix character.
_EXPLICIT_ORDERS = frozenset({ByteOrder.LITTLE, ByteOrder.BIG, ByteOrder.NATIVE})


def encode(descriptor: "ElementDescriptor") -> str:
    """
    Encodes a descriptor as a format string.

    Args:
        descriptor: The element descriptor to encode.

    Returns:
        The format string, e.g. ``'<i'`` or ``'T{B:a:xxxxxxxd:b:}'``.

    Raises:
        UnsupportedLayoutError: A sub-array shape appears anywhere in the descriptor.
        InvalidFieldNameError: A field name contains ':' or is not encodable.
        InvalidWidthError: A wide string's size is not a multiple of 4 bytes.
        UnknownElementTypeError: A kind has no code in the grammar.
        AllocationFailureError: Memory ran out while building the string.
    """
    parts: List[str] = []
    try:
        _encode_into(descriptor, parts)
        return "".join(parts)
    except MemoryError as e:
        raise AllocationFailureError("memory allocation failed while building format string") from e


def _encode_into(descriptor: "ElementDescriptor", out: List[str]) -> None:
    if descriptor.has_subarray_shape():
        raise UnsupportedLayoutError(
            "data types with sub-arrays cannot be exported as buffers"
        )
    if descriptor.is_record():
        _encode_record(descriptor, out)
    else:
        _encode_scalar(descriptor, out)


def _encode_record(descriptor: "ElementDescriptor", out: List[str]) -> None:
    out.append(RECORD_OPEN)
    cursor = 0
    for field in descriptor.fields:
        if cursor < field.offset:
            out.append(PADDING_CODE * (field.offset - cursor))
        cursor = field.end
        _encode_into(field.descriptor, out)
        out.append(FIELD_SEPARATOR)
        out.append(_field_name(field.name))
        out.append(FIELD_SEPARATOR)
    out.append(RECORD_CLOSE)


def _field_name(name: str) -> str:
    """Validates a field name for inclusion between separators."""
    try:
        name.encode(FIELD_NAME_ENCODING)
    except (UnicodeEncodeError, AttributeError) as e:
        raise InvalidFieldNameError(f"invalid field name {name!r}", name=name) from e
    if FIELD_SEPARATOR in name:
        raise InvalidFieldNameError(
            f"'{FIELD_SEPARATOR}' is not an allowed character in buffer field names",
            name=name,
        )
    return name


def _encode_scalar(descriptor: "ElementDescriptor", out: List[str]) -> None:
    if descriptor.byteorder in _EXPLICIT_ORDERS:
        out.append(descriptor.byteorder.value)

    kind = descriptor.kind
    match kind:
        case ElementKind.STRING:
            out.append(f"{descriptor.itemsize}s")
        case ElementKind.UNICODE:
            count, remainder = divmod(descriptor.itemsize, WIDE_CHAR_SIZE)
            if remainder:
                raise InvalidWidthError(
                    f"wide string item size {descriptor.itemsize} is not a "
                    f"multiple of {WIDE_CHAR_SIZE}"
                )
            out.append(f"{count}w")
        case _ if kind in _TYPE_CODES:
            out.append(_TYPE_CODES[kind])
        case _:
            raise UnknownElementTypeError(f"unknown dtype code {int(kind)}", kind=int(kind))
