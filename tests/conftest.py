# tests/conftest.py
"""
Pytest configuration and shared fixtures for the test suite.
"""
import pytest
import numpy as np

from ndexport import ElementDescriptor, ElementKind, StridedBuffer

@pytest.fixture
def int_descriptor() -> ElementDescriptor:
    """A 4-byte signed integer with no declared byte order."""
    return ElementDescriptor.scalar(ElementKind.INT, 4)

@pytest.fixture
def padded_record() -> ElementDescriptor:
    """An unsigned byte at offset 0 and a double at offset 8, item size 16."""
    return ElementDescriptor.record([
        ("a", 0, ElementDescriptor.scalar(ElementKind.UBYTE)),
        ("b", 8, ElementDescriptor.scalar(ElementKind.DOUBLE, 8)),
    ])

@pytest.fixture
def c_buffer(int_descriptor) -> StridedBuffer:
    """
    A writable 2x3 row-major buffer of 4-byte integers over a bytearray
    holding the bytes 0..23.
    """
    return StridedBuffer(bytearray(range(24)), int_descriptor, (2, 3), (12, 4))

@pytest.fixture
def numpy_matrix() -> np.ndarray:
    return np.arange(12, dtype=np.float64).reshape(3, 4)
