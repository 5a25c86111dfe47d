# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""FIR engine model definitions."""

from pathlib import Path
from typing import Annotated, Optional

import numpy as np
from annotated_types import Ge, Le
from pydantic import Field, ValidationInfo, field_validator, model_validator

from fir_engine.dsp import utils
from fir_engine.dsp.coefficients import DEFAULT_COEFFS, ORDER, Q_TAP, W_TAP
from fir_engine.dsp.delay_line import W_IN
from fir_engine.models.stage import StageConfig, StageParameters

Width = Annotated[int, Ge(2), Le(32)]


class FirEngineConfig(StageConfig):
    """Construction time configuration of a FIR engine."""

    order: int = Field(default=ORDER, ge=1, description="Filter order, one less than the number of taps.")
    in_width: Width = Field(default=W_IN, description="Input sample width in bits.")
    tap_width: Width = Field(default=W_TAP, description="Coefficient width in bits.")
    out_width: Optional[int] = Field(
        default=None,
        ge=2,
        le=64,
        description="Output width in bits. Defaults to 33 for fixed and 32 for mutable coefficients.",
    )
    Q_tap: int = Field(default=Q_TAP, ge=0, description="Fractional bits in the coefficients.")
    mutable_coefficients: bool = Field(
        default=False, description="Whether taps can be written at runtime."
    )
    coeffs: Optional[list[int]] = Field(
        default=None, description="Default tap values, newest sample first."
    )
    coeffs_path: Optional[Path] = Field(
        default=None, description="Path to a file of default tap values, readable by np.loadtxt."
    )

    @model_validator(mode="after")
    def check_coeffs(self):
        """Check the coefficients match the order and tap width."""
        if self.coeffs is not None and self.coeffs_path is not None:
            raise ValueError("Set only one of coeffs and coeffs_path")

        if self.coeffs is None and self.coeffs_path is None and self.order != ORDER:
            raise ValueError(f"Default coefficients are for order {ORDER}, supply coeffs")

        if self.coeffs is not None:
            if len(self.coeffs) != self.order + 1:
                raise ValueError(
                    f"Order {self.order} needs {self.order + 1} coefficients, got {len(self.coeffs)}"
                )
            for n, c in enumerate(self.coeffs):
                utils.check_signed(c, self.tap_width, f"coeffs[{n}]")
        return self

    def load_coeffs(self) -> tuple[int, ...]:
        """Return the default tap values, reading ``coeffs_path`` if set."""
        if self.coeffs is not None:
            return tuple(self.coeffs)
        if self.coeffs_path is None:
            return DEFAULT_COEFFS

        coeffs = np.atleast_1d(np.loadtxt(self.coeffs_path))
        if not np.all(coeffs == np.round(coeffs)):
            raise ValueError(f"{self.coeffs_path} does not contain integer coefficients")
        if len(coeffs) != self.order + 1:
            raise ValueError(
                f"Order {self.order} needs {self.order + 1} coefficients, "
                f"{self.coeffs_path} has {len(coeffs)}"
            )
        return tuple(utils.check_signed(int(c), self.tap_width, f"tap[{n}]") for n, c in enumerate(coeffs))


class CoefficientWrite(StageParameters):
    """A single runtime write of one tap.

    The bounds depend on the engine being written. They are checked when
    the model is validated with a context holding ``order`` and
    ``tap_width``, and always by :meth:`apply`.
    """

    addr: int = Field(ge=0, description="Tap index.")
    data: int = Field(description="New tap value.")

    @field_validator("addr")
    @classmethod
    def check_addr(cls, addr: int, info: ValidationInfo) -> int:
        order = (info.context or {}).get("order")
        if order is not None and addr > order:
            raise ValueError(f"Tap index {addr} outside 0..{order}")
        return addr

    @field_validator("data")
    @classmethod
    def check_data(cls, data: int, info: ValidationInfo) -> int:
        tap_width = (info.context or {}).get("tap_width")
        if tap_width is not None:
            utils.check_signed(data, tap_width, "data")
        return data

    def apply(self, engine) -> bool:
        """Write the tap to a mutable engine on an idle tick.

        Raises
        ------
        pydantic.ValidationError
            If ``addr`` or ``data`` do not fit the engine's order or tap
            width. The engine is not ticked.

        Returns
        -------
        bool
            True if the tap now holds ``data``.
        """
        write = self.model_validate(
            self.model_dump(), context={"order": engine.order, "tap_width": engine.tap_width}
        )
        return engine.write_coefficient(write.addr, write.data)
