"""Wire format for circuits: ``{"gates": [[{"type", "targets", "params"?}, ...], ...]}``.

Qubit ordering on the wire matches the simulator: qubit 0 is the most
significant bit of a basis index. ``targets`` lists controls first and the
target last (``[control, target]`` for CNOT, ``[c1, c2, target]`` for CCNOT).
"""
from __future__ import annotations

import json
import numbers
from collections.abc import Mapping, Sequence
from typing import Any, Optional

import numpy as np

from .circuit import (
    Circuit, Gate, GATE_TYPES, GateKind, FIXED_KINDS, ROTATION_KINDS,
    SingleQubitGate, RotationGate, CNOTGate, CCNOTGate,
)
from .errors import CircuitError, GateStructureError, MissingParameterError, QubitIndexError

ARITY = {
    **{k: 1 for k in FIXED_KINDS},
    **{k: 1 for k in ROTATION_KINDS},
    GateKind.CNOT: 2,
    GateKind.CCNOT: 3,
}

# builder-UI entries that carry no unitary
DISPLAY_ONLY = frozenset({"MEASURE"})


def _is_sequence(value) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _angle(params) -> Optional[float]:
    if params is None:
        return None
    if isinstance(params, Mapping):
        params = params.get("theta")
        if params is None:
            return None
    elif _is_sequence(params):
        if len(params) != 1:
            raise GateStructureError(f"expected a single angle, got {params!r}")
        params = params[0]
    if isinstance(params, bool) or not isinstance(params, numbers.Real):
        raise GateStructureError(f"angle must be a real number, got {params!r}")
    return float(params)


def decode_gate(
    raw: Any,
    *,
    num_qubits: Optional[int] = None,
    default_angle: Optional[float] = None,
) -> Gate:
    """
    Turn one wire gate into a typed gate.

    Raises GateStructureError for a malformed object, QubitIndexError when a
    target is negative or (given ``num_qubits``) too large, and
    MissingParameterError for a rotation without an angle when no
    ``default_angle`` is supplied.
    """
    if isinstance(raw, GATE_TYPES):
        gate = raw
    else:
        gate = _decode_mapping(raw, default_angle)

    for role, q in zip(_roles(gate), gate.targets):
        if num_qubits is not None and q >= num_qubits:
            raise QubitIndexError(q, num_qubits, role)
    return gate


def _roles(gate: Gate) -> tuple[str, ...]:
    if isinstance(gate, CNOTGate):
        return ("control", "target")
    if isinstance(gate, CCNOTGate):
        return ("control1", "control2", "target")
    return ("target",)


def _decode_mapping(raw, default_angle: Optional[float]) -> Gate:
    if not isinstance(raw, Mapping) or not raw:
        raise GateStructureError(f"empty or non-object gate: {raw!r}")

    type_ = raw.get("type")
    targets = raw.get("targets")
    if not isinstance(type_, str) or not type_:
        raise GateStructureError(f"gate is missing 'type': {dict(raw)!r}")
    if not _is_sequence(targets):
        raise GateStructureError(f"gate is missing 'targets': {dict(raw)!r}")
    if len(targets) == 0:
        raise GateStructureError(f"gate has no targets: {dict(raw)!r}")

    try:
        kind = GateKind(type_.strip().upper())
    except ValueError:
        raise GateStructureError(f"unknown gate type {type_!r}") from None

    if len(targets) != ARITY[kind]:
        raise GateStructureError(f"{kind.value} gate needs {ARITY[kind]} target(s), got {list(targets)}")

    for q in targets:
        if isinstance(q, bool) or not isinstance(q, (int, np.integer)):
            raise GateStructureError(f"target indices must be ints, got {list(targets)}")
        if q < 0:
            raise QubitIndexError(q, None)

    if kind in FIXED_KINDS:
        return SingleQubitGate(kind, targets[0])

    if kind in ROTATION_KINDS:
        theta = _angle(raw.get("params"))
        if theta is None:
            if default_angle is None:
                raise MissingParameterError(f"{kind.value} gate on qubit {targets[0]} has no angle")
            theta = default_angle
        return RotationGate(kind, targets[0], theta)

    if kind is GateKind.CNOT:
        return CNOTGate(*targets)

    return CCNOTGate(*targets)


def decode_circuit(data: Any) -> list[list[Any]]:
    """
    Check the circuit-level shape and return the raw time-steps.

    Individual gates are left undecoded so a caller can deal with each one
    on its own. Anything but a nested sequence is a CircuitError.
    """
    if isinstance(data, Circuit):
        return [list(step) for step in data.steps]

    if isinstance(data, Mapping):
        if "gates" not in data:
            raise CircuitError("circuit object has no 'gates' field")
        data = data["gates"]

    if not _is_sequence(data):
        raise CircuitError(f"circuit gates must be a list of time-steps, got {type(data).__name__}")

    steps = []
    for i, step in enumerate(data):
        if not _is_sequence(step):
            raise CircuitError(f"time-step {i} must be a list of gates, got {type(step).__name__}")
        steps.append(list(step))
    return steps


def circuit_from_dict(data: Any, *, default_angle: Optional[float] = None) -> Circuit:
    """Strict decode: any bad gate raises."""
    circuit = Circuit()
    for s, step in enumerate(decode_circuit(data)):
        circuit.steps.append([])
        for raw in step:
            circuit.add(decode_gate(raw, default_angle=default_angle), step=s)
    return circuit


def circuit_to_dict(circuit: Circuit) -> dict:
    return {"gates": [[gate.to_dict() for gate in step] for step in circuit.steps]}


def dumps(circuit: Circuit, **kwargs) -> str:
    return json.dumps(circuit_to_dict(circuit), **kwargs)


def loads(text: str, *, default_angle: Optional[float] = None) -> Circuit:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CircuitError(f"circuit is not valid JSON: {e}") from e
    return circuit_from_dict(data, default_angle=default_angle)


def circuit_from_positioned(gates: Sequence[Mapping]) -> dict:
    """
    Convert a flat builder-UI gate list into wire time-steps.

    Entries look like ``{"type", "position", "qubit"}`` for one-qubit gates,
    ``{"type": "CNOT", "control", "target", "position"}`` and
    ``{"type": "CCNOT", "controls": [c1, c2], "target", "position"}``;
    rotations carry ``theta``. MEASURE entries are dropped. Missing qubit
    fields produce an empty ``targets`` list so the simulator flags the gate
    rather than losing it silently.
    """
    if not _is_sequence(gates):
        raise CircuitError("positioned gates must be a list")

    placed: dict[int, list[dict]] = {}
    for entry in gates:
        if not isinstance(entry, Mapping):
            raise CircuitError(f"positioned gate must be an object, got {entry!r}")
        position = entry.get("position")
        if isinstance(position, bool) or not isinstance(position, int) or position < 0:
            raise CircuitError(f"gate has no valid position: {dict(entry)!r}")

        type_ = str(entry.get("type", "")).upper()
        if type_ in DISPLAY_ONLY:
            continue

        wire = {"type": type_, "targets": _positioned_targets(type_, entry)}
        if entry.get("theta") is not None:
            wire["params"] = entry["theta"]
        placed.setdefault(position, []).append(wire)

    depth = max(placed) + 1 if placed else 0
    return {"gates": [placed.get(p, []) for p in range(depth)]}


def _positioned_targets(type_: str, entry: Mapping) -> list:
    if type_ == "CNOT":
        qubits = [entry.get("control"), entry.get("target")]
    elif type_ == "CCNOT":
        controls = entry.get("controls")
        if not _is_sequence(controls):
            controls = [entry.get("control1"), entry.get("control2")]
        qubits = [*controls, entry.get("target")]
    else:
        qubits = [entry.get("qubit")]

    if any(q is None for q in qubits):
        return []
    return list(qubits)
