"""
Configuration for the circuit simulator.
"""
from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional


_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SimulatorConfig:
    """Knobs for one simulation run. Instances are immutable and safe to share."""

    # Rotation gates arriving without an angle
    default_angle: float = math.pi / 2
    substitute_missing_angle: bool = True

    # Probabilities at or below this are treated as numerical noise
    probability_threshold: float = 1e-3

    # Dense Kronecker expansion costs O(4^N); warn above this many qubits
    dense_qubit_limit: int = 10

    # Assert sum |amp|^2 == 1 after every applied gate
    check_norm: bool = False
    norm_tolerance: float = 1e-6

    def __post_init__(self):
        if not math.isfinite(self.default_angle):
            raise ValueError(f"default_angle must be finite, got {self.default_angle}")
        if not (0.0 <= self.probability_threshold < 1.0):
            raise ValueError(f"probability_threshold must be in [0, 1), got {self.probability_threshold}")
        if self.dense_qubit_limit <= 0:
            raise ValueError("dense_qubit_limit must be positive")
        if self.norm_tolerance <= 0:
            raise ValueError("norm_tolerance must be positive")

    def with_overrides(self, **changes) -> "SimulatorConfig":
        return replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SimulatorConfig":
        """Build a config from ``QASSIST_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        kwargs = {}

        if "QASSIST_DEFAULT_ANGLE" in env:
            kwargs["default_angle"] = float(env["QASSIST_DEFAULT_ANGLE"])
        if "QASSIST_SUBSTITUTE_MISSING_ANGLE" in env:
            kwargs["substitute_missing_angle"] = env["QASSIST_SUBSTITUTE_MISSING_ANGLE"].strip().lower() in _TRUE
        if "QASSIST_PROBABILITY_THRESHOLD" in env:
            kwargs["probability_threshold"] = float(env["QASSIST_PROBABILITY_THRESHOLD"])
        if "QASSIST_DENSE_QUBIT_LIMIT" in env:
            kwargs["dense_qubit_limit"] = int(env["QASSIST_DENSE_QUBIT_LIMIT"])
        if "QASSIST_CHECK_NORM" in env:
            kwargs["check_norm"] = env["QASSIST_CHECK_NORM"].strip().lower() in _TRUE
        if "QASSIST_NORM_TOLERANCE" in env:
            kwargs["norm_tolerance"] = float(env["QASSIST_NORM_TOLERANCE"])

        return cls(**kwargs)


DEFAULT_CONFIG = SimulatorConfig()
