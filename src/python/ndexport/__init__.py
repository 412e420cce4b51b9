# ndexport/__init__.py
"""
Export strided, typed memory as self-describing views.
"""
from .types import ByteOrder, ElementKind, ViewFlags
from .dataclasses import FieldInfo, LayoutSnapshot
from .descriptor import ElementDescriptor
from .buffer import StridedBuffer
from .cache import ViewCache
from .lifetime import LifetimeGuard
from .view import ViewRecord
from .exporter import export_view, release_view
from .convenience import export_array, dtype_format
from ._internal.format_encoder import encode as encode_format
from .exceptions import (
    NdExportError,
    DescriptorError,
    FormatError,
    UnsupportedLayoutError,
    InvalidFieldNameError,
    InvalidWidthError,
    UnknownElementTypeError,
    ExportError,
    NotContiguousError,
    NotWritableError,
    AllocationFailureError,
    BufferLifetimeError,
)

__version__ = "0.0.1"

# Define what gets imported with 'from ndexport import *'
__all__ = [
    'export_view',
    'release_view',
    'export_array',
    'dtype_format',
    'encode_format',
    'ElementDescriptor',
    'FieldInfo',
    'LayoutSnapshot',
    'StridedBuffer',
    'ViewCache',
    'LifetimeGuard',
    'ViewRecord',
    'ByteOrder',
    'ElementKind',
    'ViewFlags',
    'NdExportError',
    'DescriptorError',
    'FormatError',
    'UnsupportedLayoutError',
    'InvalidFieldNameError',
    'InvalidWidthError',
    'UnknownElementTypeError',
    'ExportError',
    'NotContiguousError',
    'NotWritableError',
    'AllocationFailureError',
    'BufferLifetimeError',
    '__version__',
]
