# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import pytest
import numpy as np

import fir_engine.dsp.utils as utils
import fir_engine.dsp.signal_gen as sg
from fir_engine.dsp.accumulator import accumulator
from fir_engine.dsp.delay_line import delay_line


@pytest.mark.parametrize("width", [2, 16, 32, 33])
def test_signed_range(width):
    assert utils.signed_max(width) == 2 ** (width - 1) - 1
    assert utils.signed_min(width) == -(2 ** (width - 1))


@pytest.mark.parametrize("x", np.random.default_rng(0).integers(-(2**40), 2**40, 50))
@pytest.mark.parametrize("width", [8, 16, 32])
def test_wrap(x, width):
    x = int(x)
    if utils.signed_min(width) <= x <= utils.signed_max(width):
        assert utils.wrap(x, width) == x
    else:
        with pytest.warns(utils.OverflowWarning):
            y = utils.wrap(x, width)
        assert utils.signed_min(width) <= y <= utils.signed_max(width)
        assert (y - x) % (1 << width) == 0


def test_wrap_edges():
    assert utils.wrap(2**15 - 1, 16) == 2**15 - 1
    assert utils.wrap(-(2**15), 16) == -(2**15)
    with pytest.warns(utils.OverflowWarning):
        assert utils.wrap(2**15, 16) == -(2**15)
    with pytest.warns(utils.OverflowWarning):
        assert utils.wrap(-(2**15) - 1, 16) == 2**15 - 1


def test_saturate():
    assert utils.saturate(100, 8) == 100
    with pytest.warns(utils.SaturationWarning):
        assert utils.saturate(128, 8) == 127
    with pytest.warns(utils.SaturationWarning):
        assert utils.saturate(-129, 8) == -128


@pytest.mark.parametrize("val", [2**15, -(2**15) - 1, 1.5, "a"])
def test_check_signed_rejects(val):
    with pytest.raises((ValueError, TypeError)):
        utils.check_signed(val, 16)


def test_check_signed_accepts_numpy():
    assert utils.check_signed(np.int64(-5), 16) == -5
    assert type(utils.check_signed(np.int16(7), 16)) is int


def test_check_index():
    assert utils.check_index(0, 50) == 0
    assert utils.check_index(50, 50) == 50
    for bad in [-1, 51, True, 3.7]:
        with pytest.raises(utils.IndexOutOfRange):
            utils.check_index(bad, 50)


@pytest.mark.parametrize("x", [0.0, 0.5, -0.25, 0.999, -1.0])
def test_fixed_float(x):
    x_int = utils.float_to_fixed(x, 15)
    assert utils.fixed_to_float(x_int, 15) == pytest.approx(x, abs=2**-16)

    x_arr = utils.float_to_fixed_array(np.array([x]), 15)
    assert x_arr[0] == x_int
    assert utils.fixed_to_float_array(x_arr, 15)[0] == utils.fixed_to_float(x_int, 15)


def test_acc_bits():
    assert utils.acc_bits(16, 16, 51) == 38
    assert utils.acc_bits(16, 16, 64) == 38
    assert utils.acc_bits(16, 16, 65) == 39


def test_accumulator_register():
    acc = accumulator(8)
    assert acc.reduce([10, 20, 30]) == 60
    assert acc.out == 0

    with pytest.warns(utils.OverflowWarning):
        assert acc.reduce([100, 100]) == 200 - 256
    acc.commit(5)
    acc.reset()
    assert acc.out == 0


def test_delay_line():
    dl = delay_line(4, 8)
    for n in range(1, 7):
        dl.advance(n)
    assert dl.snapshot() == (6, 5, 4, 3)
    assert dl.peek(3) == 3

    with pytest.raises(ValueError):
        dl.advance(128)
    assert dl.snapshot() == (6, 5, 4, 3)

    dl.reset()
    assert dl.snapshot() == (0, 0, 0, 0)


def test_quantize_signal():
    signal = sg.quantize_signal(np.array([-1.5, -1.0, 0.0, 0.5, 1.0, 2.0]), 16)
    np.testing.assert_array_equal(signal, [-(2**15), -(2**15 - 1), 0, 16384, 2**15 - 1, 2**15 - 1])
    assert signal.dtype == np.int64
