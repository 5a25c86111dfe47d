# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Signal generator DSP utilities."""

import numpy as np
import scipy.signal as spsig

from fir_engine.dsp import utils as utils


# These functions return integer signals for a given sample width, by
# default 16b. Amplitudes are given as a fraction of full scale.


def quantize_signal(signal: np.ndarray, width: int) -> np.ndarray:
    """Quantizes a float signal scaled between -1 and 1 to signed
    integers of the given width.

    Parameters
    ----------
    signal : np.ndarray
        The input signal to be quantized.
    width : int
        The number of bits in each quantized sample.

    Returns
    -------
    np.ndarray
        The quantized signal, as int64.

    """
    signal = np.round(signal * utils.signed_max(width))
    return utils.saturate_array(signal, width).astype(np.int64)


def impulse(length: int, amplitude: int = 1, delay: int = 0) -> np.ndarray:
    """
    Generate an integer impulse: ``amplitude`` at index ``delay`` and
    zero everywhere else.
    """
    signal = np.zeros(length, dtype=np.int64)
    signal[delay] = amplitude
    return signal


def step(length: int, amplitude: int = 1) -> np.ndarray:
    """Generate a constant integer signal."""
    return np.full(length, amplitude, dtype=np.int64)


def sin(fs: int, length: float, freq: float, amplitude: float, width: int = 16) -> np.ndarray:
    """
    Generate a quantized sinusoidal signal.

    Parameters
    ----------
    fs : int
        The sampling frequency in Hz.
    length : float
        The duration of the signal in seconds.
    freq : float
        The frequency of the sinusoid in Hz.
    amplitude : float
        The amplitude of the sinusoid, as a fraction of full scale.
    width : int, optional
        The sample width in bits, by default 16.

    Returns
    -------
    np.ndarray
        The generated sinusoidal signal.
    """
    t = np.arange(int(fs * length)) / fs
    signal = amplitude * np.sin(2 * np.pi * freq * t)
    return quantize_signal(signal, width)


def square(fs: int, length: float, freq: float, amplitude: float, width: int = 16) -> np.ndarray:
    """
    Generate a quantized square wave signal.

    Parameters
    ----------
    fs : int
        The sampling frequency in Hz.
    length : float
        The duration of the signal in seconds.
    freq : float
        The frequency of the square wave in Hz.
    amplitude : float
        The amplitude of the square wave, as a fraction of full scale.
    width : int, optional
        The sample width in bits, by default 16.

    Returns
    -------
    np.ndarray
        The generated square wave.
    """
    t = np.arange(int(fs * length)) / fs
    signal = amplitude * spsig.square(2 * np.pi * freq * t)
    return quantize_signal(signal, width)


def white_noise(length: int, amplitude: float, width: int = 16, seed: int | None = None) -> np.ndarray:
    """
    Generate uniformly distributed quantized white noise.

    Parameters
    ----------
    length : int
        Number of samples.
    amplitude : float
        Peak amplitude, as a fraction of full scale.
    width : int, optional
        The sample width in bits, by default 16.
    seed : int, optional
        Seed for the random generator.

    Returns
    -------
    np.ndarray
        The generated noise.
    """
    rng = np.random.default_rng(seed)
    signal = amplitude * rng.uniform(-1, 1, length)
    return quantize_signal(signal, width)
