# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.

import numpy as np
import pytest
import scipy.signal as spsig
from pathlib import Path
from filelock import FileLock


def _q15(coeffs):
    return np.round(np.asarray(coeffs) * 2**15).astype(int)


def make_coeff_files():

    gen_dir = Path(__file__).parent / "autogen"
    gen_dir.mkdir(exist_ok=True, parents=True)

    coeffs = _q15(spsig.firwin(51, 0.25))
    out_dir = Path(gen_dir, "lowpass_51.txt")
    with FileLock(str(out_dir) + ".lock"):
        if not out_dir.is_file():
            np.savetxt(out_dir, coeffs, fmt="%d")

    coeffs = _q15(spsig.firwin(11, 0.5))
    out_dir = Path(gen_dir, "lowpass_11.txt")
    with FileLock(str(out_dir) + ".lock"):
        if not out_dir.is_file():
            np.savetxt(out_dir, coeffs, fmt="%d")

    coeffs = np.arange(51, 0, -1) * 100
    out_dir = Path(gen_dir, "descending_51.txt")
    with FileLock(str(out_dir) + ".lock"):
        if not out_dir.is_file():
            np.savetxt(out_dir, coeffs, fmt="%d")

    coeffs = spsig.firwin(51, 0.25)
    out_dir = Path(gen_dir, "float_51.txt")
    with FileLock(str(out_dir) + ".lock"):
        if not out_dir.is_file():
            np.savetxt(out_dir, coeffs)


@pytest.fixture(scope="session", autouse=True)
def coeff_files():
    make_coeff_files()


if __name__ == "__main__":
    make_coeff_files()
