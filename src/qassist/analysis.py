"""
Static checks and statistics for a circuit, without simulating it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .circuit import Circuit, GateKind, SELF_INVERSE_KINDS
from .config import SimulatorConfig, DEFAULT_CONFIG
from .io import decode_circuit
from .simulator import GateIssue, iter_resolved
from .state import check_num_qubits


@dataclass(frozen=True)
class CircuitStats:
    total_gates: int
    depth: int
    width: int
    complexity: str


def _complexity(total_gates: int) -> str:
    if total_gates > 20:
        return "Complex"
    if total_gates > 10:
        return "Moderate"
    if total_gates > 5:
        return "Intermediate"
    return "Simple"


def validate_circuit(
    circuit,
    num_qubits: int,
    config: Optional[SimulatorConfig] = None,
) -> list[GateIssue]:
    """Every issue run_circuit would report for this circuit, in order."""
    config = config or DEFAULT_CONFIG
    num_qubits = check_num_qubits(num_qubits)

    issues = []
    for _, _, _, found in iter_resolved(decode_circuit(circuit), num_qubits, config):
        issues.extend(found)
    return issues


def circuit_stats(circuit: Circuit) -> CircuitStats:
    used: set[int] = set()
    for _, _, gate in circuit.gates():
        used.update(gate.targets)

    # trailing empty steps do not add depth
    depth = 0
    for s, step in enumerate(circuit.steps):
        if step:
            depth = s + 1

    return CircuitStats(
        total_gates=circuit.num_gates,
        depth=depth,
        width=len(used),
        complexity=_complexity(circuit.num_gates),
    )


def cancellation_hints(circuit: Circuit) -> list[str]:
    """Self-inverse gates repeated on the same qubits in consecutive steps, plus a note on many Hadamards."""
    hints = []
    for s in range(len(circuit.steps) - 1):
        following = circuit.steps[s + 1]
        for gate in circuit.steps[s]:
            if gate.kind not in SELF_INVERSE_KINDS:
                continue
            if gate in following:
                hints.append(
                    f"{gate.kind.value} on {list(gate.targets)} in steps {s} and {s + 1} cancels out"
                )

    hadamards = sum(1 for _, _, gate in circuit.gates() if gate.kind is GateKind.H)
    if hadamards > 2:
        hints.append(f"{hadamards} Hadamard gates; pairs on the same qubit may simplify (H H = I)")
    return hints
