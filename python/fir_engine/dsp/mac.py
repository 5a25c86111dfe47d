# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The multiply stage of the FIR: one product per tap."""


def product_bits(in_width: int, tap_width: int) -> int:
    """Width of a full precision signed product."""
    return in_width + tap_width


def mac_stage(delay: tuple, coeffs: tuple) -> tuple:
    """
    Multiply each delay line slot by its tap weight.

    ``product[i] = delay[i] * coeffs[i]``, computed with Python integers
    so no product is ever rounded or truncated.

    Parameters
    ----------
    delay : tuple[int]
        Delay line snapshot, newest sample first.
    coeffs : tuple[int]
        Coefficient snapshot, same length as ``delay``.

    Returns
    -------
    tuple[int]
        The products, in tap order.
    """
    assert len(delay) == len(coeffs), "delay line and taps must be the same length"
    return tuple(x * c for x, c in zip(delay, coeffs))


def mac_stage_folded(delay: tuple, coeffs: tuple) -> tuple:
    """
    Multiply using the even symmetry of a linear phase filter.

    Pairs of samples sharing a tap weight are pre-added, so only
    ``ceil(n_taps / 2)`` products are formed. The result only matches
    :func:`mac_stage` when the coefficients are symmetric. The pre-added
    samples need one more bit than the input width.

    Parameters
    ----------
    delay : tuple[int]
        Delay line snapshot, newest sample first.
    coeffs : tuple[int]
        Symmetric coefficient snapshot, same length as ``delay``.

    Returns
    -------
    tuple[int]
        The folded products, outer pair first. For an odd number of taps
        the last entry is the centre tap product.
    """
    n = len(coeffs)
    assert len(delay) == n, "delay line and taps must be the same length"
    half = n // 2
    products = [(delay[k] + delay[n - 1 - k]) * coeffs[k] for k in range(half)]
    if n % 2:
        products.append(delay[half] * coeffs[half])
    return tuple(products)

