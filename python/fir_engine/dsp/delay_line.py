# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The tapped delay line feeding the MAC stage."""

from fir_engine.dsp import utils

# input sample width in bits
W_IN = 16


def shift(slots: tuple, sample: int) -> tuple:
    """Return the slots after one active tick: every sample moves one
    slot older and ``sample`` lands in slot 0. The oldest sample falls
    off the end.
    """
    return (sample,) + tuple(slots[:-1])


class delay_line:
    """
    A shift register of the most recent input samples.

    Slot 0 holds the newest sample and slot ``n_taps - 1`` the oldest, so
    after a settled tick slot i holds the sample that arrived i active
    ticks ago. All slots are replaced together as a single tuple, so a
    reader sees either the whole old line or the whole new one.

    Parameters
    ----------
    n_taps : int
        Number of slots, one per filter tap.
    in_width : int
        Width of an input sample in bits.
    """

    def __init__(self, n_taps: int, in_width: int = W_IN):
        self.n_taps = n_taps
        self.in_width = in_width
        self.reset()

    def __len__(self):
        return self.n_taps

    def reset(self) -> None:
        """Clear every slot to zero."""
        self._slots = (0,) * self.n_taps

    def advance(self, sample: int) -> None:
        """Shift in a new sample."""
        sample = utils.check_signed(sample, self.in_width, "sample")
        self._slots = shift(self._slots, sample)

    def peek(self, index: int) -> int:
        """Return the sample in slot ``index`` without changing anything."""
        return self._slots[utils.check_index(index, self.n_taps - 1)]

    def snapshot(self) -> tuple:
        return self._slots

    def commit(self, slots) -> None:
        assert len(slots) == self.n_taps
        self._slots = tuple(slots)
