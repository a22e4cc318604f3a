"""
Typed gate operations and the time-stepped Circuit container.

Each gate class carries exactly the fields its physics needs and checks
them on construction, so a gate that exists is structurally sound. Whether
its qubits fit a particular register is only known at run time.
"""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

import numpy as np

from .errors import GateStructureError


class GateKind(str, Enum):
    H = "H"
    X = "X"
    Y = "Y"
    Z = "Z"
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    CNOT = "CNOT"
    CCNOT = "CCNOT"


FIXED_KINDS = frozenset({GateKind.H, GateKind.X, GateKind.Y, GateKind.Z})
ROTATION_KINDS = frozenset({GateKind.RX, GateKind.RY, GateKind.RZ})

# gates that undo themselves when repeated
SELF_INVERSE_KINDS = FIXED_KINDS | {GateKind.CNOT, GateKind.CCNOT}


def _kind(value, allowed) -> GateKind:
    try:
        kind = GateKind(value)
    except ValueError:
        raise GateStructureError(f"unknown gate type {value!r}") from None
    if kind not in allowed:
        raise GateStructureError(f"gate type {kind.value} is not valid here")
    return kind


def _index(value, role: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise GateStructureError(f"{role} must be an int, got {value!r}")
    if value < 0:
        raise GateStructureError(f"{role} must be non-negative, got {value}")
    return int(value)


def _distinct(*qubits: int) -> None:
    if len(set(qubits)) != len(qubits):
        raise GateStructureError(f"qubits must be distinct, got {list(qubits)}")


@dataclass(frozen=True)
class SingleQubitGate:
    kind: GateKind
    qubit: int

    def __post_init__(self):
        object.__setattr__(self, "kind", _kind(self.kind, FIXED_KINDS))
        object.__setattr__(self, "qubit", _index(self.qubit, "qubit"))

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.qubit,)

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "targets": list(self.targets)}


@dataclass(frozen=True)
class RotationGate:
    kind: GateKind
    qubit: int
    theta: float

    def __post_init__(self):
        object.__setattr__(self, "kind", _kind(self.kind, ROTATION_KINDS))
        object.__setattr__(self, "qubit", _index(self.qubit, "qubit"))
        theta = self.theta
        if isinstance(theta, bool) or not isinstance(theta, numbers.Real) or not math.isfinite(theta):
            raise GateStructureError(f"{self.kind.value} angle must be a finite real, got {theta!r}")
        object.__setattr__(self, "theta", float(theta))

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.qubit,)

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "targets": list(self.targets), "params": self.theta}


@dataclass(frozen=True)
class CNOTGate:
    control: int
    target: int

    def __post_init__(self):
        object.__setattr__(self, "control", _index(self.control, "control"))
        object.__setattr__(self, "target", _index(self.target, "target"))
        _distinct(self.control, self.target)

    @property
    def kind(self) -> GateKind:
        return GateKind.CNOT

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.control, self.target)

    def to_dict(self) -> dict:
        return {"type": "CNOT", "targets": list(self.targets)}


@dataclass(frozen=True)
class CCNOTGate:
    control1: int
    control2: int
    target: int

    def __post_init__(self):
        object.__setattr__(self, "control1", _index(self.control1, "control1"))
        object.__setattr__(self, "control2", _index(self.control2, "control2"))
        object.__setattr__(self, "target", _index(self.target, "target"))
        _distinct(self.control1, self.control2, self.target)

    @property
    def kind(self) -> GateKind:
        return GateKind.CCNOT

    @property
    def targets(self) -> tuple[int, ...]:
        return (self.control1, self.control2, self.target)

    def to_dict(self) -> dict:
        return {"type": "CCNOT", "targets": list(self.targets)}


Gate = Union[SingleQubitGate, RotationGate, CNOTGate, CCNOTGate]
GATE_TYPES = (SingleQubitGate, RotationGate, CNOTGate, CCNOTGate)


class Circuit:
    """
    Ordered time-steps of gates.

    Builder methods append the gate as a new time-step unless ``step`` is
    given, in which case it joins that step (empty steps are created as
    needed). Gates in one step are meant to touch disjoint qubits.
    """

    def __init__(self, steps=None):
        self.steps: list[list[Gate]] = []
        for step in steps or []:
            self.steps.append([])
            for gate in step:
                self.add(gate, step=len(self.steps) - 1)

    def add(self, gate: Gate, step: Optional[int] = None) -> "Circuit":
        if not isinstance(gate, GATE_TYPES):
            raise GateStructureError(f"not a gate: {gate!r}")

        if step is None:
            self.steps.append([gate])
            return self

        if step < 0:
            raise ValueError(f"step must be non-negative, got {step}")
        while len(self.steps) <= step:
            self.steps.append([])
        self.steps[step].append(gate)
        return self

    def h(self, q: int, step: Optional[int] = None):
        return self.add(SingleQubitGate(GateKind.H, q), step)

    def x(self, q: int, step: Optional[int] = None):
        return self.add(SingleQubitGate(GateKind.X, q), step)

    def y(self, q: int, step: Optional[int] = None):
        return self.add(SingleQubitGate(GateKind.Y, q), step)

    def z(self, q: int, step: Optional[int] = None):
        return self.add(SingleQubitGate(GateKind.Z, q), step)

    def rx(self, q: int, theta: float, step: Optional[int] = None):
        return self.add(RotationGate(GateKind.RX, q, theta), step)

    def ry(self, q: int, theta: float, step: Optional[int] = None):
        return self.add(RotationGate(GateKind.RY, q, theta), step)

    def rz(self, q: int, theta: float, step: Optional[int] = None):
        return self.add(RotationGate(GateKind.RZ, q, theta), step)

    def cx(self, control: int, target: int, step: Optional[int] = None):
        return self.add(CNOTGate(control, target), step)

    cnot = cx

    def ccx(self, control1: int, control2: int, target: int, step: Optional[int] = None):
        return self.add(CCNOTGate(control1, control2, target), step)

    toffoli = ccx

    @property
    def depth(self) -> int:
        return len(self.steps)

    @property
    def num_gates(self) -> int:
        return sum(len(step) for step in self.steps)

    def gates(self) -> Iterator[tuple[int, int, Gate]]:
        """Yield (step_index, gate_index, gate) in execution order."""
        for s, step in enumerate(self.steps):
            for g, gate in enumerate(step):
                yield s, g, gate

    def __len__(self):
        return len(self.steps)

    def __eq__(self, other):
        if not isinstance(other, Circuit):
            return NotImplemented
        return self.steps == other.steps

    def __repr__(self):
        return f"Circuit(depth={self.depth}, gates={self.num_gates})"
