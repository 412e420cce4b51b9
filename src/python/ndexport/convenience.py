# ndexport/convenience.py
"""
High-level convenience functions for common NumPy operations.
"""
from typing import Any, Union
import numpy as np

from .buffer import StridedBuffer
from .exporter import export_view
from .types import ViewFlags
from .view import ViewRecord
from ._internal import numpy_utils

def export_array(
    arr: np.ndarray,
    flags: Union[ViewFlags, int] = ViewFlags.RECORDS_RO,
) -> ViewRecord:
    """
    Exports a view of a NumPy array.

    This is a high-level wrapper around `StridedBuffer.from_numpy` and
    `export_view`. The source buffer is reachable through ``view.obj`` until
    the view is released.

    Args:
        arr: The array to export. Its memory is shared, not copied.
        flags: The capabilities the consumer requires. Defaults to shape,
            strides and format, read-only.

    Returns:
        The exported ViewRecord.
    """
    return export_view(StridedBuffer.from_numpy(arr), flags)


def dtype_format(dtype: Any) -> str:
    """
    Returns the format string describing a NumPy dtype.

    Args:
        dtype: Anything `np.dtype` accepts, e.g. ``'<i4'`` or
               ``[('a', 'u1'), ('b', 'f8')]``.

    Raises:
        FormatError: If the dtype cannot be expressed in the format grammar.
        TypeError: If the dtype is not one of NumPy's builtin types.
    """
    return numpy_utils.descriptor_from_dtype(dtype).format
