# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""The pydantic models of the FIR engine configuration."""

from .fir import FirEngineConfig, CoefficientWrite
