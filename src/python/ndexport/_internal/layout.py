# ndexport/_internal/layout.py

"""
Contiguity predicates and stride arithmetic for strided layouts.

Dimensions of extent 1 do not constrain contiguity, and an empty layout
(any extent 0) is contiguous in every order.
"""
from typing import Literal, Sequence, Tuple

Order = Literal["C", "F"]


def strides_for_shape(shape: Sequence[int], itemsize: int, order: Order = "C") -> Tuple[int, ...]:
    """Returns the byte strides of a gap-free layout in the given order."""
    strides = [0] * len(shape)
    step = itemsize
    dims = range(len(shape) - 1, -1, -1) if order == "C" else range(len(shape))
    for k in dims:
        strides[k] = step
        step *= max(shape[k], 1)
    return tuple(strides)


def _is_contiguous(shape: Sequence[int], strides: Sequence[int], itemsize: int, dims: Sequence[int]) -> bool:
    if any(n == 0 for n in shape):
        return True
    expected = itemsize
    for k in dims:
        if shape[k] != 1:
            if strides[k] != expected:
                return False
            expected *= shape[k]
    return True


def is_c_contiguous(shape: Sequence[int], strides: Sequence[int], itemsize: int) -> bool:
    """True if the layout is gap-free when iterated last dimension fastest."""
    return _is_contiguous(shape, strides, itemsize, range(len(shape) - 1, -1, -1))


def is_f_contiguous(shape: Sequence[int], strides: Sequence[int], itemsize: int) -> bool:
    """True if the layout is gap-free when iterated first dimension fastest."""
    return _is_contiguous(shape, strides, itemsize, range(len(shape)))


def element_count(shape: Sequence[int]) -> int:
    count = 1
    for n in shape:
        count *= n
    return count


def strided_extent(shape: Sequence[int], strides: Sequence[int], itemsize: int) -> Tuple[int, int]:
    """
    Byte range touched by a strided layout, relative to its first element.

    Returns:
        ``(low, high)`` such that every byte of every element lies in
        ``[low, high)``. Negative strides make ``low`` negative. An empty
        layout returns ``(0, 0)``.
    """
    if any(n == 0 for n in shape):
        return 0, 0
    low = 0
    high = itemsize
    for n, stride in zip(shape, strides):
        span = (n - 1) * stride
        if span < 0:
            low += span
        else:
            high += span
    return low, high
