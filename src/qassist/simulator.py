from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing     import Any, Iterator, Optional

import numpy as np

from .apply       import apply_single_qubit_gate, apply_two_qubit_gate, apply_ccnot
from .circuit     import Gate, SingleQubitGate, RotationGate, CNOTGate, CCNOTGate
from .complexmath import Complex, from_pairs, to_pairs
from .config      import SimulatorConfig, DEFAULT_CONFIG
from .errors      import SimulationError, GateStructureError, MissingParameterError, QubitIndexError
from .gates       import FIXED, ROTATIONS, CNOT
from .io          import decode_circuit, decode_gate
from .logging     import get_logger
from .measurement import probabilities
from .state       import zero_state, validate_state, copy_state, check_num_qubits, norm_squared

logger = get_logger(__name__)


class IssueKind(str, Enum):
    STRUCTURE = "structure"
    QUBIT_RANGE = "qubit_range"
    MISSING_PARAMETER = "missing_parameter"
    SHARED_QUBIT = "shared_qubit"


@dataclass(frozen=True)
class GateIssue:
    step: int
    index: int
    kind: IssueKind
    message: str
    gate: Any = None
    # False when the gate still ran (defaulted angle, reused qubit)
    skipped: bool = True

    def __str__(self):
        return f"step {self.step}, gate {self.index}: {self.message}"


@dataclass(frozen=True, eq=False)
class SimulationResult:
    """
    Final statevector of one run plus everything that went wrong on the way.

    ``partial`` means at least one gate was skipped, so the amplitudes are not
    those of the circuit the caller sent. ``trusted`` additionally requires
    that no angle was defaulted and no step reused a qubit.
    """
    state: np.ndarray
    num_qubits: int
    applied: int = 0
    issues: tuple[GateIssue, ...] = ()
    threshold: float = DEFAULT_CONFIG.probability_threshold

    @property
    def skipped(self) -> int:
        return sum(1 for issue in self.issues if issue.skipped)

    @property
    def partial(self) -> bool:
        return self.skipped > 0

    @property
    def trusted(self) -> bool:
        return not self.issues

    @property
    def is_empty(self) -> bool:
        return self.applied == 0

    def amplitudes(self) -> list[Complex]:
        return to_pairs(self.state)

    def probabilities(self, threshold: Optional[float] = None) -> dict[str, float]:
        if threshold is None:
            threshold = self.threshold
        return probabilities(self.state, self.num_qubits, threshold=threshold)


def resolve_gate(
    raw: Any,
    step: int,
    index: int,
    num_qubits: int,
    config: SimulatorConfig = DEFAULT_CONFIG,
) -> tuple[Optional[Gate], list[GateIssue]]:
    """
    Decode and range-check one gate for a register of ``num_qubits``.

    Returns the gate to apply (None when it must be skipped) and the issues
    found. A rotation missing its angle gets ``config.default_angle`` and an
    issue, unless substitution is switched off, in which case it is skipped.
    """
    issues = []
    try:
        try:
            gate = decode_gate(raw, num_qubits=num_qubits)
        except MissingParameterError as e:
            if not config.substitute_missing_angle:
                raise
            gate = decode_gate(raw, num_qubits=num_qubits, default_angle=config.default_angle)
            issues.append(GateIssue(
                step, index, IssueKind.MISSING_PARAMETER,
                f"{e}; substituted default angle {config.default_angle:.6g}", raw, skipped=False,
            ))
    except MissingParameterError as e:
        return None, [GateIssue(step, index, IssueKind.MISSING_PARAMETER, str(e), raw)]
    except QubitIndexError as e:
        return None, [GateIssue(step, index, IssueKind.QUBIT_RANGE, str(e), raw)]
    except GateStructureError as e:
        return None, [GateIssue(step, index, IssueKind.STRUCTURE, str(e), raw)]

    return gate, issues


def apply_gate(state: np.ndarray, gate: Gate, num_qubits: int) -> np.ndarray:
    if isinstance(gate, SingleQubitGate):
        return apply_single_qubit_gate(state, FIXED[gate.kind.value], gate.qubit, num_qubits)

    if isinstance(gate, RotationGate):
        U = ROTATIONS[gate.kind.value](gate.theta)
        return apply_single_qubit_gate(state, U, gate.qubit, num_qubits)

    if isinstance(gate, CNOTGate):
        return apply_two_qubit_gate(state, CNOT, gate.control, gate.target, num_qubits)

    if isinstance(gate, CCNOTGate):
        return apply_ccnot(state, gate.control1, gate.control2, gate.target, num_qubits)

    raise GateStructureError(f"not a gate: {gate!r}")


def iter_resolved(
    steps: list[list[Any]],
    num_qubits: int,
    config: SimulatorConfig = DEFAULT_CONFIG,
) -> Iterator[tuple[int, int, Optional[Gate], list[GateIssue]]]:
    """
    Walk raw time-steps, yielding ``(step, index, gate_or_None, issues)``.

    Besides resolve_gate's checks this flags a gate that reuses a qubit
    already touched earlier in the same step. Such gates are still
    returned; they run in listed order.
    """
    for s, step in enumerate(steps):
        touched: set[int] = set()

        for g, raw in enumerate(step):
            gate, issues = resolve_gate(raw, s, g, num_qubits, config)

            if gate is not None:
                overlap = touched.intersection(gate.targets)
                if overlap:
                    issues.append(GateIssue(
                        s, g, IssueKind.SHARED_QUBIT,
                        f"qubit(s) {sorted(overlap)} already used in this step; applied in listed order",
                        raw, skipped=False,
                    ))
                touched.update(gate.targets)

            yield s, g, gate, issues


def _is_pair_array(state: np.ndarray) -> bool:
    # (dim, 2) real array of (re, im) rows, as produced by np.array(to_pairs(psi))
    return state.ndim == 2 and state.shape[1] == 2 and not np.iscomplexobj(state)


def run_circuit(
    circuit,
    num_qubits: int,
    *,
    config: Optional[SimulatorConfig] = None,
    initial_state=None,
) -> SimulationResult:
    """
    Simulate ``circuit`` on ``num_qubits`` qubits starting from |0...0>.

    ``circuit`` is a Circuit or its wire form (``{"gates": [[...], ...]}`` or
    the bare nested list). A bad ``num_qubits`` or a non-nested gate list
    raises CircuitError before anything is simulated. Individual bad gates
    are skipped and reported in ``SimulationResult.issues``.
    """
    config = config or DEFAULT_CONFIG
    num_qubits = check_num_qubits(num_qubits)
    steps = decode_circuit(circuit)

    if num_qubits > config.dense_qubit_limit:
        logger.warning(
            "num_qubits=%d exceeds dense_qubit_limit=%d; each 1/2-qubit gate builds a %d x %d operator",
            num_qubits, config.dense_qubit_limit, 2 ** num_qubits, 2 ** num_qubits,
        )

    if initial_state is None:
        state = zero_state(num_qubits)
    else:
        if not isinstance(initial_state, np.ndarray) or _is_pair_array(initial_state):
            initial_state = from_pairs(initial_state)
        validate_state(initial_state, num_qubits, atol=config.norm_tolerance)
        state = copy_state(initial_state)

    issues: list[GateIssue] = []
    applied = 0

    for s, g, gate, found in iter_resolved(steps, num_qubits, config):
        for issue in found:
            logger.warning("%s", issue)
        issues.extend(found)

        if gate is None:
            continue

        logger.debug("step %d, gate %d: %s on %s", s, g, gate.kind.value, list(gate.targets))
        state = apply_gate(state, gate, num_qubits)
        applied += 1

        if config.check_norm:
            total = norm_squared(state)
            if not np.isclose(total, 1.0, atol=config.norm_tolerance):
                raise SimulationError(f"state norm drifted after step {s}, gate {g}: sum |amp|^2 = {total}")

    result = SimulationResult(
        state=state,
        num_qubits=num_qubits,
        applied=applied,
        issues=tuple(issues),
        threshold=config.probability_threshold,
    )

    if result.partial:
        logger.warning("%d gate(s) skipped; result does not reflect the full circuit", result.skipped)
    return result


def simulate_statevector(circuit, num_qubits: int, **kwargs) -> np.ndarray:
    """Like run_circuit, but returns only the vector and refuses partial runs."""
    result = run_circuit(circuit, num_qubits, **kwargs)
    if result.partial:
        details = "; ".join(str(issue) for issue in result.issues if issue.skipped)
        raise SimulationError(f"{result.skipped} gate(s) could not be applied: {details}")
    return result.state
