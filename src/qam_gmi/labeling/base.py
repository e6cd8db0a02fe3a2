"""
Bit-subset enumeration for index-labeled constellations.

The binary label of a constellation point is its index, so bit k of the
label is bit k of the index. The helpers below enumerate the symbols whose
label bit k equals a fixed value.
"""

import numpy as np
from numpy.typing import NDArray


def _check_bit_position(bit: int, width: int) -> None:
    if width < 1:
        raise ValueError(f"Label width must be at least 1, got {width}.")
    if not 0 <= bit < width:
        raise ValueError(f"Bit position must be in [0, {width}), got {bit}.")


def insert_zero(index, bit: int, width: int):
    """
    Enumerate symbols whose label bit ``bit`` equals a fixed value.

    Inserts a zero at position ``bit`` of the (width-1)-bit compact ``index``:
    bits below ``bit`` stay in place, bits at or above it move up by one.
    Adding ``value << bit`` to the result gives the symbol index whose bit
    ``bit`` equals ``value``. For a fixed (bit, width) the map is a bijection
    from [0, 2**(width-1)) onto the width-bit values with that bit cleared.

    Works on Python ints and on numpy integer arrays.
    """
    _check_bit_position(bit, width)
    mask_above = ((1 << (width - bit - 1)) - 1) << (bit + 1)
    mask_below = (1 << bit) - 1
    return ((index << 1) & mask_above) | (index & mask_below)


def bit_subset_indices(bit: int, value: int, width: int) -> NDArray[np.int_]:
    """Indices of the 2**(width-1) symbols whose label bit ``bit`` equals ``value``."""
    if value not in (0, 1):
        raise ValueError(f"Bit value must be 0 or 1, got {value}.")
    _check_bit_position(bit, width)
    compact = np.arange(1 << (width - 1), dtype=np.int64)
    return insert_zero(compact, bit, width) + (value << bit)
