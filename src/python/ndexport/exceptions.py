# ndexport/exceptions.py
"""Custom exception types for the ndexport library."""

from typing import Optional


class NdExportError(Exception):
    """Base exception for all errors raised by this library."""
    pass

class DescriptorError(NdExportError, ValueError):
    """An element descriptor was constructed with an invalid layout."""
    pass

class FormatError(NdExportError, ValueError):
    """An element descriptor cannot be expressed as a format string."""
    pass

class UnsupportedLayoutError(FormatError):
    """The descriptor (or one of its fields) has a sub-array shape."""
    pass

class InvalidFieldNameError(FormatError):
    """
    A record field name cannot be written into the format string.

    Attributes:
        name (str): The offending field name.
    """
    def __init__(self, message: str, *, name: str):
        super().__init__(message)
        self.name = name

class InvalidWidthError(FormatError):
    """A wide-string item size is not a multiple of the wide character size."""
    pass

class UnknownElementTypeError(FormatError):
    """
    The element kind has no code in the format grammar.

    Attributes:
        kind (int): The type number of the element kind.
    """
    def __init__(self, message: str, *, kind: Optional[int] = None):
        super().__init__(message)
        self.kind = kind

class ExportError(NdExportError, ValueError):
    """A view request cannot be satisfied by the buffer's layout or flags."""
    pass

class NotContiguousError(ExportError):
    """The buffer does not have the contiguity the request demands."""
    pass

class NotWritableError(ExportError):
    """Write access was requested on a read-only buffer."""
    pass

class AllocationFailureError(NdExportError, MemoryError):
    """Growing a cache failed; the previous cache state is left untouched."""
    pass

class BufferLifetimeError(NdExportError, RuntimeError):
    """
    The outstanding-view count of a buffer was misused.

    Raised when a buffer is destroyed while views still reference it, or when
    a release is not matched by an acquisition. This is a programming error in
    the host and is never recovered from internally.
    """
    pass
