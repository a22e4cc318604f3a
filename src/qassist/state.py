import numpy as np

from .errors import CircuitError


def check_num_qubits(num_qubits) -> int:
	if isinstance(num_qubits, bool) or not isinstance(num_qubits, (int, np.integer)):
		raise CircuitError(f"num_qubits must be an int, got {num_qubits!r}")
	if num_qubits <= 0:
		raise CircuitError(f"num_qubits must be positive, got {num_qubits}")
	return int(num_qubits)


def basis_state(index: int, num_qubits: int) -> np.ndarray:
	dim = 2 ** check_num_qubits(num_qubits)
	if index < 0 or index >= dim:
		raise ValueError(f"index must be between 0 and {dim-1}")

	state = np.zeros(dim, dtype=complex)
	state[index] = 1.0
	return state


def zero_state(num_qubits: int) -> np.ndarray:
	return basis_state(0, num_qubits)


def norm_squared(state: np.ndarray) -> float:
	state = np.asarray(state)
	return float(np.sum(state.real * state.real + state.imag * state.imag))


def validate_state(state, num_qubits: int, *, atol: float | None = None) -> None:
	"""Shape check, plus a unit-norm check when ``atol`` is given."""
	dim = 2 ** check_num_qubits(num_qubits)
	state = np.asarray(state)
	if state.shape != (dim,):
		raise CircuitError(f"state must have shape ({dim},) for num_qubits={num_qubits}, got {state.shape}")
	if atol is not None and not np.isclose(norm_squared(state), 1.0, atol=atol):
		raise CircuitError(f"state is not normalised: sum |amp|^2 = {norm_squared(state)}")


def copy_state(state) -> np.ndarray:
	return np.array(state, dtype=complex, copy=True)
