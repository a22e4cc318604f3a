"""
Operator application on a statevector.

Conventions (shared by every routine in this module):
- statevector length is 2**num_qubits
- qubit indices are 0...num_qubits-1
- qubit 0 is the most significant bit of the basis index, so qubit q
  lives at bit position num_qubits - 1 - q

Single- and two-qubit gates are expanded to the full 2^N x 2^N operator by
Kronecker products, which costs O(4^N) memory and time. That is fine for the
register sizes this simulator targets (up to ~10 qubits) and gets slow fast
beyond that. Controlled bit flips (CNOT, CCNOT) can instead go through
apply_controlled_x, which permutes amplitudes in O(2^N).
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import QubitIndexError, GateStructureError
from .gates import I
from .state import validate_state


# |r><c| for r, c in {0, 1}
_UNITS = [
    [np.array([[1, 0], [0, 0]], dtype=complex), np.array([[0, 1], [0, 0]], dtype=complex)],
    [np.array([[0, 0], [1, 0]], dtype=complex), np.array([[0, 0], [0, 1]], dtype=complex)],
]


def _check_qubit(qubit, num_qubits: int, role: str = "target") -> int:
    if isinstance(qubit, bool) or not isinstance(qubit, (int, np.integer)):
        raise QubitIndexError(qubit, num_qubits, role)
    if qubit < 0 or qubit >= num_qubits:
        raise QubitIndexError(qubit, num_qubits, role)
    return int(qubit)


def _check_matrix(U, dim: int) -> np.ndarray:
    U = np.asarray(U, dtype=complex)
    if U.shape != (dim, dim):
        raise GateStructureError(f"gate matrix must have shape {(dim, dim)}, got {U.shape}")
    return U


def bit_mask(qubit: int, num_qubits: int) -> int:
    return 1 << (num_qubits - 1 - qubit)


def _kron_all(ops) -> np.ndarray:
    big_op = ops[0]
    for op in ops[1:]:
        big_op = np.kron(big_op, op)
    return big_op


def expand_single_qubit_gate(gate: np.ndarray, target: int, num_qubits: int) -> np.ndarray:
    target = _check_qubit(target, num_qubits)
    gate = _check_matrix(gate, 2)

    # most significant qubit first
    ops = []
    for qubit in range(num_qubits):
        if qubit == target:
            ops.append(gate)
        else:
            ops.append(I)

    return _kron_all(ops)


def expand_two_qubit_gate(gate: np.ndarray, control: int, target: int, num_qubits: int) -> np.ndarray:
    """
    Full operator for a 4x4 gate whose basis is |control, target>.

    Written as sum_{r,c} U[r,c] * (x)_q P_q, where P_q is |r_q><c_q| on the
    control and target slots and I elsewhere. Each term is a plain Kronecker
    walk in global qubit order, so control/target may be in either order
    and need not be adjacent.
    """
    control = _check_qubit(control, num_qubits, "control")
    target = _check_qubit(target, num_qubits)
    if control == target:
        raise GateStructureError("control and target must be different")
    gate = _check_matrix(gate, 4)

    dim = 2 ** num_qubits
    full = np.zeros((dim, dim), dtype=complex)

    for row in range(4):
        for col in range(4):
            amp = gate[row, col]
            if amp == 0:
                continue

            ops = []
            for qubit in range(num_qubits):
                if qubit == control:
                    ops.append(_UNITS[row >> 1][col >> 1])
                elif qubit == target:
                    ops.append(_UNITS[row & 1][col & 1])
                else:
                    ops.append(I)

            full += amp * _kron_all(ops)

    return full


def apply_single_qubit_gate(state, gate: np.ndarray, target: int, num_qubits: int) -> np.ndarray:
    validate_state(state, num_qubits)
    big_gate = expand_single_qubit_gate(gate, target, num_qubits)
    return big_gate @ np.asarray(state, dtype=complex)


def apply_two_qubit_gate(state, gate: np.ndarray, control: int, target: int, num_qubits: int) -> np.ndarray:
    validate_state(state, num_qubits)
    big_gate = expand_two_qubit_gate(gate, control, target, num_qubits)
    return big_gate @ np.asarray(state, dtype=complex)


def apply_controlled_x(state, controls: Sequence[int], target: int, num_qubits: int) -> np.ndarray:
    """
    Flip ``target`` on every basis state whose ``controls`` bits are all 1.

    Works by swapping amplitude pairs (i, i ^ target_mask); each pair is
    swapped once, from its lower index.
    """
    validate_state(state, num_qubits)

    controls = [_check_qubit(c, num_qubits, "control") for c in controls]
    target = _check_qubit(target, num_qubits)
    if len({*controls, target}) != len(controls) + 1:
        raise GateStructureError(f"controls {controls} and target {target} must be different qubits")

    control_mask = 0
    for c in controls:
        control_mask |= bit_mask(c, num_qubits)
    target_mask = bit_mask(target, num_qubits)

    new_state = np.array(state, dtype=complex, copy=True)
    dim = 2 ** num_qubits

    for i in range(dim):
        if (i & control_mask) != control_mask:
            continue
        j = i ^ target_mask
        if i < j:
            new_state[i], new_state[j] = new_state[j], new_state[i]

    return new_state


def apply_ccnot(state, control1: int, control2: int, target: int, num_qubits: int) -> np.ndarray:
    return apply_controlled_x(state, (control1, control2), target, num_qubits)
