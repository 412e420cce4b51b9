# ndexport/types.py

"""
Core type-safe enumerations and grammar constants for the ndexport library.
"""
from enum import Enum, IntEnum, IntFlag

# Grammar constants of the exported format string.
FIELD_SEPARATOR = ":"
PADDING_CODE = "x"
RECORD_OPEN = "T{"
RECORD_CLOSE = "}"
FIELD_NAME_ENCODING = "utf-8"

# Fixed-length wide strings are stored as UCS-4.
WIDE_CHAR_SIZE = 4


class ElementKind(IntEnum):
    """
    Type tag of a single element.

    The values match NumPy's builtin type numbers so that
    ``ElementKind(dtype.num)`` maps a dtype onto its kind.
    """
    BOOL = 0
    BYTE = 1
    UBYTE = 2
    SHORT = 3
    USHORT = 4
    INT = 5
    UINT = 6
    LONG = 7
    ULONG = 8
    LONGLONG = 9
    ULONGLONG = 10
    FLOAT = 11
    DOUBLE = 12
    LONGDOUBLE = 13
    CFLOAT = 14
    CDOUBLE = 15
    CLONGDOUBLE = 16
    OBJECT = 17
    STRING = 18
    UNICODE = 19
    VOID = 20
    DATETIME = 21
    TIMEDELTA = 22
    HALF = 23


class ByteOrder(str, Enum):
    """
    Byte order of a scalar element.

    DEFAULT means no order was declared and none is written to the format
    string. NATIVE is an explicitly declared native order ('=').
    """
    DEFAULT = ""
    NATIVE = "="
    LITTLE = "<"
    BIG = ">"
    NOT_APPLICABLE = "|"


class ViewFlags(IntFlag):
    """
    Capabilities a consumer requires from an exported view.

    The composite members mirror the buffer protocol's own composites: the
    contiguity requests also ask for shape and strides.
    """
    SIMPLE = 0
    REQUIRE_WRITABLE = 0x0001
    REQUIRE_FORMAT = 0x0004
    REQUIRE_SHAPE_STRIDES = 0x0008
    REQUIRE_ROW_MAJOR = 0x0020
    REQUIRE_COLUMN_MAJOR = 0x0040
    REQUIRE_ANY_CONTIGUOUS = 0x0080

    STRIDED_RO = REQUIRE_SHAPE_STRIDES
    STRIDED = REQUIRE_SHAPE_STRIDES | REQUIRE_WRITABLE
    RECORDS_RO = REQUIRE_SHAPE_STRIDES | REQUIRE_FORMAT
    RECORDS = REQUIRE_SHAPE_STRIDES | REQUIRE_FORMAT | REQUIRE_WRITABLE
    C_CONTIGUOUS = REQUIRE_ROW_MAJOR | REQUIRE_SHAPE_STRIDES
    F_CONTIGUOUS = REQUIRE_COLUMN_MAJOR | REQUIRE_SHAPE_STRIDES
    ANY_CONTIGUOUS = REQUIRE_ANY_CONTIGUOUS | REQUIRE_SHAPE_STRIDES
