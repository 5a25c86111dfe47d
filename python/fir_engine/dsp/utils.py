# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Fixed point utility functions used by the FIR pipeline."""

import numpy as np
import warnings

FLT_MIN = np.finfo(float).tiny


class OverflowWarning(Warning):
    """A warning for when a value has wrapped around its integer width."""

    pass


class SaturationWarning(Warning):
    """A warning for when a value has been saturated to prevent overflow."""

    pass


class HeadroomWarning(Warning):
    """A warning for when the output width cannot hold the worst case
    accumulation of the current coefficients.
    """

    pass


class SymmetryWarning(Warning):
    """A warning for a coefficient vector that is not symmetric, so the
    filter will not be linear phase.
    """

    pass


class IndexOutOfRange(IndexError):
    """A tap or delay line index outside 0..order."""

    pass


def db(input):
    """Convert an amplitude to decibels (20*log10(abs(x)))."""
    out = 20 * np.log10(np.abs(input) + FLT_MIN)
    return out


def Q_max(Q_format: int) -> int:
    """Return the maximum value for a given Q format, i.e.
    ``(1 << Q_format) - 1``.
    """
    return int((1 << Q_format) - 1)


def signed_max(width: int) -> int:
    """Largest value of a two's complement integer of ``width`` bits."""
    return Q_max(width - 1)


def signed_min(width: int) -> int:
    """Smallest value of a two's complement integer of ``width`` bits."""
    return -(1 << (width - 1))


def wrap(val: int, width: int) -> int:
    """Signed integer type of arbitrary width.

    Integers in Python are unbounded, so check the value is within the
    valid range. Outside the range the value wraps around exactly as a
    two's complement register of ``width`` bits would.
    """
    if signed_min(width) <= val <= signed_max(width):
        return int(val)
    else:
        warnings.warn("Overflow occurred", OverflowWarning)
        return int(((val + (1 << (width - 1))) % (1 << width)) - (1 << (width - 1)))


def check_signed(val, width: int, name: str = "value") -> int:
    """Check an integer fits a signed width and return it as an int.

    Raises
    ------
    ValueError
        If ``val`` is not integral or does not fit in ``width`` bits.
    """
    if int(val) != val:
        raise ValueError(f"{name} must be an integer, got {val}")
    if not (signed_min(width) <= val <= signed_max(width)):
        raise ValueError(
            f"{name} {val} does not fit in {width} signed bits "
            f"[{signed_min(width)}, {signed_max(width)}]"
        )
    return int(val)


def check_index(index, order: int) -> int:
    """Check a tap index is an integer within 0..order."""
    if (
        isinstance(index, (bool, np.bool_))
        or int(index) != index
        or not (0 <= index <= order)
    ):
        raise IndexOutOfRange(f"Tap index {index} outside 0..{order}")
    return int(index)


def is_symmetric(coeffs) -> bool:
    """Check coeffs[k] == coeffs[-1 - k] for every k."""
    coeffs = list(coeffs)
    return coeffs == coeffs[::-1]


def acc_bits(in_width: int, tap_width: int, n_taps: int) -> int:
    """Accumulator width that can never overflow for any inputs:
    the full product width plus ceil(log2(n_taps)) guard bits.
    """
    return in_width + tap_width + (n_taps - 1).bit_length()


def float_to_fixed(x: float, Q_sig: int = 15) -> int:
    """Round and scale a floating point number to an integer in a given
    Q format.
    """
    return int(round(x * (1 << Q_sig)))


def fixed_to_float(x: int, Q_sig: int = 15) -> float:
    """Convert an integer to floating point, given its Q format."""
    return float(x) / float(1 << Q_sig)


def float_to_fixed_array(x: np.ndarray, Q_sig: int = 15) -> np.ndarray:
    """Round and scale a floating point array to integers in a given
    Q format.
    """
    return (np.round(np.asarray(x) * (1 << Q_sig))).astype(np.int64)


def fixed_to_float_array(x: np.ndarray, Q_sig: int = 15) -> np.ndarray:
    """Convert an integer array to floating point, given its Q format."""
    return np.asarray(x).astype(float) / float(1 << Q_sig)


def saturate(val: int, width: int) -> int:
    """Saturate an integer to the range of a signed width."""
    if signed_min(width) <= val <= signed_max(width):
        return int(val)
    elif val < signed_min(width):
        warnings.warn("Saturation occurred", SaturationWarning)
        return signed_min(width)
    else:
        warnings.warn("Saturation occurred", SaturationWarning)
        return signed_max(width)


def saturate_array(x: np.ndarray, width: int) -> np.ndarray:
    """Clip an integer array to a signed width. Used when quantizing
    test signals, not by the filter itself.
    """
    return np.clip(np.asarray(x), signed_min(width), signed_max(width))
