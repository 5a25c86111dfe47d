# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
import numpy as np
import pytest
from pathlib import Path
from pydantic import ValidationError

import fir_engine.dsp.signal_gen as sg
import fir_engine.dsp.utils as utils
from fir_engine.design.parse_json import FirJson, engine_to_json, load_json, make_fir_engine
from fir_engine.dsp.coefficients import DEFAULT_COEFFS
from fir_engine.models import CoefficientWrite, FirEngineConfig

gen_dir = Path(__file__).parent / "autogen"


def make(**config):
    return make_fir_engine(
        FirJson(ir_version=1, producer_name="test", producer_version="1.0", config=config)
    )


def test_default_config():
    fut = make()

    assert fut.coefficients == DEFAULT_COEFFS
    assert fut.out_width == 33
    assert not fut.mutable_coefficients


# Note the filter coeffs files are defined in test/fir/conftest.py
@pytest.mark.parametrize(
    "coeff_path, order", [("lowpass_51.txt", 50), ("lowpass_11.txt", 10), ("descending_51.txt", 50)]
)
def test_coeffs_path(coeff_path, order):
    coeffs = np.loadtxt(Path(gen_dir, coeff_path)).astype(int)
    fut = make(order=order, coeffs_path=Path(gen_dir, coeff_path), mutable_coefficients=True)

    assert fut.n_taps == order + 1
    np.testing.assert_array_equal(fut.impulse_response(), coeffs)

    signal = sg.white_noise(200, 0.5, seed=0)
    np.testing.assert_array_equal(fut.process_frame(signal), fut.reference_frame(signal))


def test_float_coeffs_file_rejected():
    config = FirEngineConfig(coeffs_path=Path(gen_dir, "float_51.txt"))

    with pytest.raises(ValueError):
        config.load_coeffs()


def test_coeffs_path_wrong_length():
    config = FirEngineConfig(coeffs_path=Path(gen_dir, "lowpass_11.txt"))

    with pytest.raises(ValueError):
        config.load_coeffs()


@pytest.mark.parametrize(
    "config",
    [
        {"order": 10},
        {"coeffs": [1, 2, 3]},
        {"coeffs": [2**15] + [0] * 50},
        {"coeffs": [0] * 51, "coeffs_path": "x.txt"},
        {"in_width": 1},
        {"tap_width": 33},
        {"out_width": 1},
        {"out_width": 65},
        {"not_a_field": 1},
    ],
)
def test_bad_config(config):
    with pytest.raises(ValidationError):
        FirEngineConfig(**config)


def test_json_round_trip(tmp_path):
    fut = make(mutable_coefficients=True)
    fut.write_coefficient(0, 100)
    fut.write_coefficient(50, 100)

    json_path = tmp_path / "fir.json"
    json_path.write_text(engine_to_json(fut).model_dump_fir())
    new = make_fir_engine(load_json(json_path))

    assert new.coefficients == fut.coefficients
    assert new.coeff_store.defaults == fut.coefficients
    assert new.mutable_coefficients
    assert new.out_width == 32

    signal = sg.white_noise(100, 0.5, seed=1)
    np.testing.assert_array_equal(new.process_frame(signal), fut.process_frame(signal))


def test_json_coeffs_on_one_line():
    dump = engine_to_json(make()).model_dump_fir()

    lines = [line for line in dump.splitlines() if '"coeffs"' in line]
    assert len(lines) == 1
    assert lines[0].strip().startswith('"coeffs": [24, 0, -30')


def test_load_json_text(tmp_path):
    json_str = """
    {
      "ir_version": 1,
      "producer_name": "test",
      "producer_version": "1.0",
      "fs": 16000,
      "config": {
        "order": 4,
        "coeffs": [1, 2, 3, 2, 1],
        "out_width": 24
      }
    }
    """
    json_path = tmp_path / "fir.json"
    json_path.write_text(json_str)

    fut = make_fir_engine(load_json(json_path))

    assert fut.fs == 16000
    assert fut.out_width == 24
    np.testing.assert_array_equal(fut.process_frame(sg.impulse(5)), [1, 2, 3, 2, 1])


def test_coefficient_write_model():
    fut = make(mutable_coefficients=True)

    assert CoefficientWrite(addr=7, data=-7).apply(fut)
    assert fut.coeff_store.get(7) == -7

    for addr, data in [(51, 0), (0, utils.signed_max(16) + 1)]:
        with pytest.raises(ValidationError):
            CoefficientWrite(addr=addr, data=data).apply(fut)
    assert fut.n_ticks == 1

    with pytest.raises(ValidationError):
        CoefficientWrite(addr=-1, data=0)


def test_coefficient_write_other_order():
    fut = make(order=10, mutable_coefficients=True, coeffs=[1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1])

    write = CoefficientWrite(addr=30, data=5)
    with pytest.raises(ValidationError):
        write.apply(fut)
    assert fut.coefficients == (1, 2, 3, 4, 5, 6, 5, 4, 3, 2, 1)
    assert fut.n_ticks == 0

    with pytest.raises(ValidationError):
        CoefficientWrite.model_validate(
            {"addr": 30, "data": 5}, context={"order": fut.order, "tap_width": fut.tap_width}
        )

    assert CoefficientWrite(addr=10, data=-5).apply(fut)
    assert fut.coeff_store.get(10) == -5


def test_coefficient_write_other_tap_width():
    fut = make(mutable_coefficients=True, tap_width=24, out_width=48)

    assert CoefficientWrite(addr=0, data=2**20).apply(fut)
    assert fut.coeff_store.get(0) == 2**20

    with pytest.raises(ValidationError):
        CoefficientWrite(addr=0, data=2**23).apply(fut)
