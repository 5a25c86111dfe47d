# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Generic pydantic models for DSP blocks."""

from pydantic import BaseModel


class StageConfig(BaseModel, extra="forbid"):
    """The pydantic model defining the construction time configuration of a DSP block."""

    pass


class StageParameters(BaseModel, extra="forbid"):
    """The pydantic model defining the runtime configurable parameters of a DSP block."""

    pass
