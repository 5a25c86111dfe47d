# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The summation stage and output register of the FIR."""

from fir_engine.dsp import utils

# output widths of the two configurations
W_OUT_STATIC = 33
W_OUT_DYNAMIC = 32


def accumulate(products, out_width: int) -> int:
    """Sum the products exactly, then wrap the total to ``out_width``
    bits. There is no intermediate rounding and no saturation.
    """
    return utils.wrap(sum(products), out_width)


class accumulator:
    """
    Reduce the per tap products to one output sample.

    The only state is the registered output, which holds its value
    until the next active tick or reset.

    Parameters
    ----------
    out_width : int
        Width of the output register in bits. The sum wraps around as a
        two's complement number of this width, raising an
        :class:`OverflowWarning` if it does.

    Attributes
    ----------
    out : int
        The registered output sample.
    """

    def __init__(self, out_width: int):
        self.out_width = out_width
        self.reset()

    def reset(self) -> None:
        """Clear the output register."""
        self.out = 0

    def reduce(self, products) -> int:
        """Sum the products without registering the result."""
        return accumulate(products, self.out_width)

    def commit(self, out: int) -> None:
        self.out = out
