# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.

"""The streaming fixed point FIR engine."""

import numpy as np
import warnings

from fir_engine.dsp import generic as dspg
from fir_engine.dsp import utils
from fir_engine.dsp.accumulator import W_OUT_DYNAMIC, W_OUT_STATIC, accumulate, accumulator
from fir_engine.dsp.coefficients import DEFAULT_COEFFS, Q_TAP, W_TAP, apply_write, coefficient_store
from fir_engine.dsp.delay_line import W_IN, delay_line, shift
from fir_engine.dsp.mac import mac_stage, product_bits
from fir_engine.dsp.types import ControllerState, EngineState, TickInputs

# outputs are returned in int64 arrays
MAX_OUT_WIDTH = 64


class fir_engine(dspg.dsp_block):
    """
    A direct form FIR filter, stepped one tick at a time.

    Every tick the engine computes its complete next state from the
    current one with :meth:`next_state`, then commits the delay line,
    coefficients and output register together. Within a tick every stage
    reads the state from before the tick, as synchronous registers do.

    On an active tick (enable asserted) the new sample is shifted into
    the delay line, each slot is multiplied by its tap and the products
    are summed into the output register. On an idle tick nothing but the
    coefficient store may change. Reset overrides everything else on the
    same tick: the delay line and output are cleared and the default
    coefficients restored.

    When the coefficients are mutable, a write on a tick where enable is
    also asserted is dropped without error. A write on an idle tick is
    used from the next active tick.

    Parameters
    ----------
    mutable_coefficients : bool, optional
        If True the coefficient write port exists. Defaults to False.
    coeffs : tuple[int], optional
        Default tap values, newest sample first. Defaults to the 51 tap
        low pass table.
    in_width : int, optional
        Input sample width in bits.
    tap_width : int, optional
        Coefficient width in bits.
    out_width : int, optional
        Output width in bits. Defaults to 33 for fixed coefficients and
        32 for mutable coefficients.
    Q_tap : int, optional
        Number of fractional bits in the coefficients, used to scale the
        float outputs and frequency response.

    Attributes
    ----------
    coeff_store : :class:`fir_engine.dsp.coefficients.coefficient_store`
        The tap weights.
    delay : :class:`fir_engine.dsp.delay_line.delay_line`
        The input samples of the last n_taps active ticks.
    acc : :class:`fir_engine.dsp.accumulator.accumulator`
        The summation stage and output register.
    order : int
        Filter order, number of taps minus one.
    n_taps : int
        Number of taps in the filter.
    dropped_writes : int
        Number of coefficient writes discarded because the filter was
        enabled on the same tick.
    n_ticks : int
        Number of ticks run since construction.
    """

    def __init__(
        self,
        fs: float = 48000,
        mutable_coefficients: bool = False,
        coeffs=DEFAULT_COEFFS,
        in_width: int = W_IN,
        tap_width: int = W_TAP,
        out_width: int | None = None,
        Q_tap: int = Q_TAP,
    ):
        super().__init__(fs, Q_sig=in_width - 1)

        if out_width is None:
            out_width = W_OUT_DYNAMIC if mutable_coefficients else W_OUT_STATIC
        if out_width < max(in_width, tap_width):
            raise ValueError(f"Output width of {out_width} bits is narrower than the inputs")
        if out_width > MAX_OUT_WIDTH:
            raise ValueError(f"Output width of {out_width} bits does not fit in an int64 output")

        self.mutable_coefficients = mutable_coefficients
        self.in_width = in_width
        self.tap_width = tap_width
        self.out_width = out_width
        self.Q_tap = Q_tap

        self.coeff_store = coefficient_store(coeffs, tap_width, mutable_coefficients)
        self.order = self.coeff_store.order
        self.n_taps = self.order + 1
        self.delay = delay_line(self.n_taps, in_width)
        self.acc = accumulator(out_width)

        self._state = ControllerState.RESET
        self.dropped_writes = 0
        self.n_ticks = 0

        self.check_headroom()

    @property
    def Q_out(self) -> int:
        """Q format of the output samples."""
        return self.Q_sig + self.Q_tap

    @property
    def state(self) -> ControllerState:
        """The controller state after the last tick."""
        return self._state

    @property
    def coefficients(self) -> tuple:
        """The current taps."""
        return self.coeff_store.snapshot()

    @property
    def delay_line(self) -> tuple:
        """The current delay line contents, newest sample first."""
        return self.delay.snapshot()

    @property
    def output(self) -> int:
        """The registered output sample."""
        return self.acc.out

    def snapshot(self) -> EngineState:
        """The complete state of the engine."""
        return EngineState(self._state, self.delay.snapshot(), self.coeff_store.snapshot(), self.acc.out)

    def check_headroom(self) -> bool:
        """Check the output register can hold the worst case sum of the
        current coefficients. The worst case is a full scale negative
        input on every tap.

        Returns
        -------
        bool
            True if there is enough headroom.
        """
        worst = (1 << (self.in_width - 1)) * self.coeff_store.abs_sum()
        if worst > utils.signed_max(self.out_width):
            warnings.warn(
                "Output width of %d bits is not sufficient to guarantee no overflow, "
                "%d bits are needed for these coefficients"
                % (self.out_width, worst.bit_length() + 1),
                utils.HeadroomWarning,
            )
            return False
        return True

    def next_state(self, current: EngineState, inputs: TickInputs) -> EngineState:
        """
        Compute the state after one tick, without changing the engine.

        Parameters
        ----------
        current : EngineState
            The settled state before the tick.
        inputs : TickInputs
            The inputs for the tick. Must already be range checked.

        Returns
        -------
        EngineState
            The settled state after the tick.
        """
        if inputs.reset:
            return EngineState(
                ControllerState.RESET,
                (0,) * self.n_taps,
                self.coeff_store.defaults,
                0,
            )

        if self.mutable_coefficients:
            coeffs, dropped = apply_write(current.coeffs, inputs)
        else:
            coeffs, dropped = current.coeffs, False

        if not inputs.enable:
            return EngineState(ControllerState.IDLE, current.delay, coeffs, current.out, dropped)

        # the MAC sees the newly shifted delay line but the taps from
        # before this tick
        delay = shift(current.delay, inputs.sample)
        products = mac_stage(delay, current.coeffs)
        out = accumulate(products, self.out_width)

        return EngineState(ControllerState.ACTIVE, delay, coeffs, out, dropped)

    def _check_inputs(self, inputs: TickInputs) -> TickInputs:
        inputs = inputs._replace(sample=utils.check_signed(inputs.sample, self.in_width, "sample"))
        return self.coeff_store.check_write(inputs)

    def _commit(self, new: EngineState) -> None:
        rewritten = new.coeffs is not self.coeff_store.snapshot()

        self._state = new.state
        self.delay.commit(new.delay)
        self.coeff_store.commit(new.coeffs)
        self.acc.commit(new.out)
        self.dropped_writes += int(new.write_dropped)
        self.n_ticks += 1

        if rewritten and new.state is not ControllerState.RESET:
            self.check_headroom()

    def tick(
        self,
        sample: int = 0,
        enable: bool = False,
        reset: bool = False,
        coeff_write_enable: bool = False,
        coeff_write_addr: int = 0,
        coeff_write_data: int = 0,
    ) -> int:
        """
        Run one tick of the filter.

        Parameters
        ----------
        sample : int
            Input sample, must fit in ``in_width`` signed bits.
        enable : bool
            Process ``sample`` this tick.
        reset : bool
            Assert reset. Overrides every other input.
        coeff_write_enable : bool
            Write ``coeff_write_data`` to tap ``coeff_write_addr``. Only
            allowed when the coefficients are mutable, and dropped if
            ``enable`` is also asserted.
        coeff_write_addr : int
            Tap index to write, 0..order.
        coeff_write_data : int
            Tap value to write, must fit in ``tap_width`` signed bits.

        Returns
        -------
        int
            The registered output after the tick.

        Raises
        ------
        ValueError
            If the sample or write data do not fit their widths.
        IndexOutOfRange
            If the write address is not a valid tap index.
        TypeError
            If a write is requested on fixed coefficients.
        """
        inputs = TickInputs(
            sample, bool(enable), bool(reset), bool(coeff_write_enable), coeff_write_addr, coeff_write_data
        )
        inputs = self._check_inputs(inputs)
        self._commit(self.next_state(self.snapshot(), inputs))
        return self.acc.out

    def process(self, sample: int) -> int:
        """
        Run one active tick: shift in the sample and return the new
        output.

        Parameters
        ----------
        sample : int
            The input sample to be processed.

        Returns
        -------
        int
            The output sample, in Q format ``Q_out``.
        """
        return self.tick(sample, enable=True)

    def reset_state(self) -> None:
        """Assert reset for one tick. Clears the delay line and output
        and restores the default coefficients.
        """
        self.tick(reset=True)

    def write_coefficient(self, index: int, value: int) -> bool:
        """
        Write a single tap on an idle tick.

        Parameters
        ----------
        index : int
            Tap index, 0..order.
        value : int
            New tap value.

        Returns
        -------
        bool
            True if the tap now holds ``value``.
        """
        self.tick(coeff_write_enable=True, coeff_write_addr=index, coeff_write_data=value)
        return self.coeff_store.get(index) == value

    def reference_frame(self, frame) -> np.ndarray:
        """
        Filter a frame with an ideal convolution using the current
        coefficients, as if starting from an empty delay line.

        The sums are exact integers with no output wraparound, so where
        the engine does not overflow this matches it exactly.

        Parameters
        ----------
        frame : np.ndarray
            1-D array of integer samples.

        Returns
        -------
        np.ndarray
            1-D array of output samples. int64 if every possible sum fits
            in 64 bits, otherwise an object array of Python ints.
        """
        x = [int(s) for s in np.asarray(frame)]
        coeffs = self.coefficients
        y = [
            sum(c * x[n - k] for k, c in enumerate(coeffs[: n + 1]))
            for n in range(len(x))
        ]
        dtype = np.int64 if self.full_precision_bits() <= 64 else object
        return np.array(y, dtype=dtype)

    def impulse_response(self) -> np.ndarray:
        """
        The first n_taps outputs for a unit impulse input, using the
        current coefficients and an empty delay line. The engine itself
        is not changed.

        Returns
        -------
        np.ndarray
            1-D int64 array of length n_taps.
        """
        state = EngineState(ControllerState.IDLE, (0,) * self.n_taps, self.coefficients, 0)
        out = np.zeros(self.n_taps, dtype=np.int64)
        for n in range(self.n_taps):
            state = self.next_state(state, TickInputs(sample=int(n == 0), enable=True))
            out[n] = state.out
        return out

    def freq_response(self, nfft: int = 512) -> tuple[np.ndarray, np.ndarray]:
        """
        Calculate the frequency response of the current coefficients.

        Parameters
        ----------
        nfft : int
            Number of FFT points.

        Returns
        -------
        tuple
            A tuple containing the frequency values in Hz and the
            corresponding complex response.

        """
        f = np.fft.rfftfreq(nfft) * self.fs
        h = np.fft.rfft(utils.fixed_to_float_array(np.array(self.coefficients), self.Q_tap), nfft)
        return f, h

    def full_precision_bits(self) -> int:
        """Output width needed for no overflow with any coefficients."""
        return utils.acc_bits(self.in_width, self.tap_width, self.n_taps)

    def product_bits(self) -> int:
        """Width of each per tap product."""
        return product_bits(self.in_width, self.tap_width)
