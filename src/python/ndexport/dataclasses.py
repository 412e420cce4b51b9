# ndexport/dataclasses.py
"""
Dataclasses for structured data within the ndexport library.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .descriptor import ElementDescriptor

@dataclass(frozen=True, slots=True)
class FieldInfo:
    """A named field of a record, positioned relative to the record start."""
    name: str
    offset: int
    descriptor: "ElementDescriptor"

    @property
    def end(self) -> int:
        """Offset of the first byte past this field."""
        return self.offset + self.descriptor.itemsize

@dataclass(frozen=True, slots=True)
class LayoutSnapshot:
    """
    Shape and strides of a buffer at one point in time.

    Shape and strides are independent tuples. A snapshot is never mutated;
    a layout change produces a new snapshot.
    """
    shape: Tuple[int, ...]
    strides: Tuple[int, ...]

    @property
    def ndim(self) -> int:
        return len(self.shape)
