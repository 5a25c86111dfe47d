# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Immutable records passed between the pipeline stages on each tick."""

from enum import Enum
from typing import NamedTuple


class ControllerState(Enum):
    """State of the filter controller after a tick."""

    RESET = "reset"
    IDLE = "idle"
    ACTIVE = "active"


class TickInputs(NamedTuple):
    """The inputs sampled on one tick.

    ``reset`` is the asserted (active high) form of the reset signal.
    The three ``coeff_write_*`` fields are only meaningful when the
    coefficients are mutable.
    """

    sample: int = 0
    enable: bool = False
    reset: bool = False
    coeff_write_enable: bool = False
    coeff_write_addr: int = 0
    coeff_write_data: int = 0


class EngineState(NamedTuple):
    """A settled snapshot of every register in the engine.

    ``delay`` is ordered newest first, so ``delay[i]`` is the sample that
    arrived i active ticks ago.
    """

    state: ControllerState
    delay: tuple[int, ...]
    coeffs: tuple[int, ...]
    out: int
    write_dropped: bool = False
