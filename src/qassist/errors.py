from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by qassist."""


class CircuitError(SimulationError, ValueError):
    """Circuit-level input that cannot be simulated at all (bad num_qubits, non-nested gates)."""


class GateError(SimulationError, ValueError):
    """A single gate operation is unusable. The driver skips these and flags the result."""


class GateStructureError(GateError):
    pass


class QubitIndexError(GateError):
    def __init__(self, qubit, num_qubits: int | None, role: str = "target"):
        self.qubit = qubit
        self.num_qubits = num_qubits
        self.role = role
        if num_qubits is None:
            super().__init__(f"{role} qubit {qubit!r} must be non-negative")
        else:
            super().__init__(f"{role} qubit {qubit!r} out of range for num_qubits={num_qubits}")


class MissingParameterError(GateError):
    pass


class ComplexOperandError(SimulationError, TypeError):
    """An operand is not a (real, imaginary) pair of real numbers."""
