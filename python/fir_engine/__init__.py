# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""
The fixed-point FIR engine Python library.

A tick-accurate model of a 51-tap streaming FIR filter, with an optional
coefficient store that can be rewritten at runtime.
"""

from importlib import metadata as _metadata

__version__ = _metadata.version("fir_engine")
