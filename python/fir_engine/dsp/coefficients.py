# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The coefficient store holding the tap weights of the filter."""

import warnings

from fir_engine.dsp import utils
from fir_engine.dsp.types import TickInputs

# number of delay stages, the filter has ORDER + 1 taps
ORDER = 50
N_TAPS = ORDER + 1

# tap width in bits, and the number of fractional bits of the default
# table (Q1.15)
W_TAP = 16
Q_TAP = 15

# 51 tap symmetric low pass, Hamming windowed sinc with a cutoff of
# 0.125*fs, normalised to approximately unity DC gain
# (the rounded taps sum to 32771). Index 0 pairs with the newest
# sample.
# fmt: off
DEFAULT_COEFFS = (
       24,     0,   -30,   -53,   -48,     0,    80,   143,
      127,     0,  -196,  -338,  -290,     0,   420,   712,
      604,     0,  -879, -1523, -1347,     0,  2381,  5144,
     7355,  8199,  7355,  5144,  2381,     0, -1347, -1523,
     -879,     0,   604,   712,   420,     0,  -290,  -338,
     -196,     0,   127,   143,    80,     0,   -48,   -53,
      -30,     0,    24,
)
# fmt: on

assert len(DEFAULT_COEFFS) == N_TAPS


def apply_write(taps: tuple, inputs: TickInputs) -> tuple[tuple, bool]:
    """Work out the tap vector after one tick of the write port.

    A write only lands when write enable is asserted and the filter
    enable is not. When both are asserted the write is dropped for this
    tick, so a tap can never change underneath a MAC that is reading it.

    Parameters
    ----------
    taps : tuple
        The taps before the tick.
    inputs : TickInputs
        The inputs for this tick. The address and data must already have
        been range checked.

    Returns
    -------
    tuple
        The taps after the tick, and whether a write was dropped.
    """
    if not inputs.coeff_write_enable:
        return taps, False
    if inputs.enable:
        return taps, True

    new_taps = list(taps)
    new_taps[inputs.coeff_write_addr] = inputs.coeff_write_data
    return tuple(new_taps), False


class coefficient_store:
    """
    Storage for the signed tap weights of the filter.

    In the static configuration the taps are constants. In the mutable
    configuration each tap can be overwritten individually while the
    filter is not processing a sample, and reset restores the defaults,
    discarding any writes.

    Symmetry (``tap[k] == tap[order - k]``) is a property of the supplied
    coefficients and is not enforced, but a :class:`SymmetryWarning` is
    raised if it does not hold.

    Parameters
    ----------
    defaults : tuple[int]
        The tap values loaded on reset.
    tap_width : int
        Width of each tap in bits.
    mutable : bool
        If True, the write port exists.

    Attributes
    ----------
    defaults : tuple[int]
        The tap values loaded on reset.
    order : int
        Filter order, one less than the number of taps.
    """

    def __init__(self, defaults=DEFAULT_COEFFS, tap_width: int = W_TAP, mutable: bool = False):
        if len(defaults) < 2:
            raise ValueError("Need at least 2 taps")
        self.tap_width = tap_width
        self.mutable = mutable
        self.defaults = tuple(
            utils.check_signed(c, tap_width, f"tap[{n}]") for n, c in enumerate(defaults)
        )
        self.order = len(self.defaults) - 1

        if not utils.is_symmetric(self.defaults):
            warnings.warn(
                "Coefficients are not symmetric, the filter will not be linear phase",
                utils.SymmetryWarning,
            )

        self.reset()

    def __len__(self):
        return self.order + 1

    def __getitem__(self, index):
        return self.get(index)

    def reset(self) -> None:
        """Restore the default tap values."""
        self._taps = self.defaults

    def get(self, index: int) -> int:
        """Return the tap at ``index``.

        Raises
        ------
        IndexOutOfRange
            If ``index`` is not in 0..order.
        """
        return self._taps[utils.check_index(index, self.order)]

    def snapshot(self) -> tuple:
        """All of the taps, as an immutable tuple."""
        return self._taps

    def commit(self, taps) -> None:
        """Replace every tap in one step."""
        assert len(taps) == self.order + 1
        self._taps = tuple(taps)

    def check_write(self, inputs: TickInputs) -> TickInputs:
        """Range check the write port of a tick before it is applied.

        Returns the inputs with the address and data as Python ints.
        """
        if not inputs.coeff_write_enable:
            return inputs
        if not self.mutable:
            raise TypeError("Coefficients are fixed, there is no write port")
        return inputs._replace(
            coeff_write_addr=utils.check_index(inputs.coeff_write_addr, self.order),
            coeff_write_data=utils.check_signed(
                inputs.coeff_write_data, self.tap_width, "coeff_write_data"
            ),
        )

    def write(self, index: int, value: int, filter_enable: bool = False) -> bool:
        """Overwrite a single tap.

        Parameters
        ----------
        index : int
            Tap index, 0..order.
        value : int
            New tap value, must fit in ``tap_width`` signed bits.
        filter_enable : bool, optional
            Whether the filter is processing a sample on the same tick.
            If it is, the write is dropped.

        Returns
        -------
        bool
            True if the write was applied, False if it was dropped.
        """
        inputs = TickInputs(
            enable=filter_enable,
            coeff_write_enable=True,
            coeff_write_addr=index,
            coeff_write_data=value,
        )
        inputs = self.check_write(inputs)
        self._taps, dropped = apply_write(self._taps, inputs)
        return not dropped

    def is_symmetric(self) -> bool:
        """Check the current taps are symmetric, i.e. linear phase."""
        return utils.is_symmetric(self._taps)

    def abs_sum(self) -> int:
        """Sum of the magnitude of the current taps."""
        return sum(abs(c) for c in self._taps)
