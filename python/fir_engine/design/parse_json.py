# Copyright 2026 XMOS LIMITED.
# This Software is subject to the terms of the XMOS Public Licence: Version 1.
"""Functions to convert JSON files to FIR engines and back."""

from pathlib import Path
import json

from pydantic import BaseModel, Field

from fir_engine.dsp.fir import fir_engine
from fir_engine.models.fir import FirEngineConfig


def path_encoder(obj):
    """Encode Path objects as strings for JSON serialization."""
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


class FirJson(BaseModel):
    """Pydantic model of the JSON file describing a FIR engine."""

    ir_version: int
    producer_name: str
    producer_version: str
    fs: int = Field(default=48000, gt=0, description="Sampling frequency in Hz")
    config: FirEngineConfig = Field(default_factory=FirEngineConfig)

    def model_dump_fir(self, indent=2):
        """Dump model as JSON with each coefficient list on one line."""
        d = self.model_dump(exclude_none=True)
        dump = json.dumps(d, indent=indent, default=path_encoder)
        if "coeffs" in d["config"]:
            coeffs = d["config"]["coeffs"]
            one_line = json.dumps(coeffs)
            many_lines = json.dumps(coeffs, indent=indent)
            # re-indent the nested list to find it in the dump
            pad = " " * (2 * indent)
            many_lines = many_lines.replace("\n", "\n" + pad)
            dump = dump.replace(many_lines, one_line)
        return dump


def load_json(path: Path) -> FirJson:
    """Read and validate a JSON file describing a FIR engine."""
    return FirJson.model_validate_json(Path(path).read_text())


def make_fir_engine(json_obj: FirJson) -> fir_engine:
    """Create a FIR engine from a Pydantic model of the JSON file
    describing it.
    """
    config = json_obj.config
    return fir_engine(
        json_obj.fs,
        mutable_coefficients=config.mutable_coefficients,
        coeffs=config.load_coeffs(),
        in_width=config.in_width,
        tap_width=config.tap_width,
        out_width=config.out_width,
        Q_tap=config.Q_tap,
    )


def engine_to_json(engine: fir_engine, producer_name="fir_engine", producer_version="1.0") -> FirJson:
    """Describe an engine, using its current coefficients as the defaults."""
    config = FirEngineConfig(
        order=engine.order,
        in_width=engine.in_width,
        tap_width=engine.tap_width,
        out_width=engine.out_width,
        Q_tap=engine.Q_tap,
        mutable_coefficients=engine.mutable_coefficients,
        coeffs=list(engine.coefficients),
    )
    return FirJson(
        ir_version=1,
        producer_name=producer_name,
        producer_version=producer_version,
        fs=int(engine.fs),
        config=config,
    )
