from __future__ import annotations

from typing import Optional, Tuple
import numpy as np

from .state import validate_state, copy_state


def _bitstring(index: int, num_qubits: int) -> str:
    # qubit 0 is the leftmost character
    return format(index, f"0{num_qubits}b")


def probabilities(
    state: np.ndarray,
    num_qubits: int,
    *,
    threshold: float = 0.0,
) -> dict[str, float]:
    """
    P(basis state) = re^2 + im^2, keyed by bitstring, keeping only entries
    strictly above ``threshold``.
    """
    validate_state(state, num_qubits)

    psi = np.asarray(state, dtype=complex)
    probs = psi.real * psi.real + psi.imag * psi.imag

    return {
        _bitstring(i, num_qubits): float(p)
        for i, p in enumerate(probs)
        if p > threshold
    }


def measure_all(
    state: np.ndarray,
    num_qubits: int,
    *,
    rng: Optional[np.random.Generator] = None,
    validate: bool = True,
) -> Tuple[int, float, np.ndarray]:

    if validate:
        validate_state(state, num_qubits)

    psi = copy_state(state)
    probs = (psi.real * psi.real + psi.imag * psi.imag)

    total = float(probs.sum())
    if not np.isclose(total, 1.0, atol=1e-10):
        raise ValueError("State is not normalised")

    if rng is None:
        rng = np.random.default_rng()

    outcome_index = int(rng.choice(len(probs), p=probs / total))
    prob = float(probs[outcome_index])

    post = np.zeros_like(psi)
    post[outcome_index] = 1.0 + 0.0j

    return outcome_index, prob, post


def sample_counts(
    state: np.ndarray,
    num_qubits: int,
    shots: int = 1024,
    *,
    seed: Optional[int] = None,
) -> dict[str, int]:
    """Histogram of ``shots`` full-register measurements of ``state``."""
    if shots <= 0:
        raise ValueError("shots must be positive")

    rng = np.random.default_rng(seed)

    counts = {}
    for _ in range(shots):
        outcome_index, _, _ = measure_all(state, num_qubits, rng=rng)
        bitstring = _bitstring(outcome_index, num_qubits)
        counts[bitstring] = counts.get(bitstring, 0) + 1
    return counts
