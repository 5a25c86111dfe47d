# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The generic DSP block and globals."""

import numpy as np
from docstring_inheritance import NumpyDocstringInheritanceInitMeta

from fir_engine.dsp import utils

# default Q format of an input sample, Q1.15
Q_SIG = 15


class dsp_block(metaclass=NumpyDocstringInheritanceInitMeta):
    """
    Generic DSP block, all blocks should inherit from this class and
    implement its methods.

    Samples are integers in a fixed point format. The float methods
    quantize the input to ``Q_sig`` and scale the output back, so that
    1.0 corresponds to full scale.

    By using the metaclass NumpyDocstringInheritanceInitMeta, parameter
    and attribute documentation can be inherited by the child classes.

    Parameters
    ----------
    fs : int
        Sampling frequency in Hz.
    Q_sig: int, optional
        Q format of the input signal, number of bits after the decimal
        point. Defaults to Q1.15.

    Attributes
    ----------
    fs : int
        Sampling frequency in Hz.
    Q_sig: int
        Q format of the input signal, number of bits after the decimal
        point.
    """

    def __init__(self, fs, Q_sig=Q_SIG):
        self.fs = fs
        self.Q_sig = Q_sig
        return

    # Q format of the output, overridden by blocks with gain scaling
    @property
    def Q_out(self) -> int:
        """Q format of the output samples."""
        return self.Q_sig

    def process(self, sample: int) -> int:
        """
        Take one new fixed point sample and return one processed sample.

        Parameters
        ----------
        sample : int
            The input sample to be processed.

        Returns
        -------
        int
            The processed sample.
        """
        raise NotImplementedError

    def process_float(self, sample: float) -> float:
        """Take one new floating point sample and return 1 processed
        sample.

        The input is quantized to ``Q_sig``, processed by the fixed point
        implementation, and scaled back so 1.0 is full scale.

        Parameters
        ----------
        sample : float
            The input sample to be processed.

        Returns
        -------
        float
            The processed output sample.
        """
        sample_int = utils.saturate(utils.float_to_fixed(sample, self.Q_sig), self.Q_sig + 1)
        y = self.process(sample_int)
        return utils.fixed_to_float(y, self.Q_out)

    def process_frame(self, frame) -> np.ndarray:
        """
        Take a frame of fixed point samples and return the processed
        frame.

        For the generic implementation, just call process for each
        sample.

        Parameters
        ----------
        frame : np.ndarray
            1-D array of integer samples.

        Returns
        -------
        np.ndarray
            1-D int64 array of processed samples, the same length as the
            input frame.
        """
        frame = np.asarray(frame)
        output = np.zeros(frame.shape[0], dtype=np.int64)
        for n in range(frame.shape[0]):
            output[n] = self.process(int(frame[n]))

        return output

    def process_frame_float(self, frame) -> np.ndarray:
        """
        Take a frame of floating point samples and return the processed
        frame, using the fixed point implementation.

        Parameters
        ----------
        frame : np.ndarray
            1-D array of float samples.

        Returns
        -------
        np.ndarray
            1-D float array of processed samples.
        """
        frame = np.asarray(frame, dtype=float)
        output = np.zeros_like(frame)
        for n in range(frame.shape[0]):
            output[n] = self.process_float(frame[n])

        return output

    def freq_response(self, nfft=512):
        """
        Calculate the frequency response of the module for a nominal
        input.

        The generic module has a flat frequency response.

        Parameters
        ----------
        nfft : int, optional
            The number of points to use for the FFT, by default 512

        Returns
        -------
        tuple
            A tuple containing the frequency values and the
            corresponding complex response.

        """
        f = np.fft.rfftfreq(nfft) * self.fs
        h = np.ones_like(f)
        return f, h
