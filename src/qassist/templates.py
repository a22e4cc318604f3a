"""Ready-made circuits for the gallery, with lookup by category, difficulty and text."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable

from .circuit import Circuit

CATEGORIES = ("beginner", "intermediate", "advanced", "algorithm", "educational")


@dataclass(frozen=True)
class Template:
    name: str
    description: str
    num_qubits: int
    build: Callable[[], Circuit]
    category: str = "educational"
    # 1 (first steps) .. 5 (hardest)
    difficulty: int = 1
    tags: tuple[str, ...] = ()

    @property
    def circuit(self) -> Circuit:
        return self.build()

    def matches(self, query: str) -> bool:
        q = query.lower()
        return (
            q in self.name.lower()
            or q in self.description.lower()
            or any(q in tag.lower() for tag in self.tags)
        )


def _superposition():
    return Circuit().h(0)


def _pauli():
    return Circuit().x(0).y(0).z(0)


def _bell():
    return Circuit().h(0).cx(0, 1)


def _interference():
    # H Z H = X, so |0> ends up in |1>
    return Circuit().h(0).z(0).h(0)


def _coin_flip():
    return Circuit().ry(0, math.pi / 2)


def _ghz():
    return Circuit().h(0).cx(0, 1).cx(1, 2)


def _toffoli():
    c = Circuit()
    c.x(0)
    c.x(1, step=0)
    c.ccx(0, 1, 2)
    return c


def _grover():
    # oracle and diffusion collapse to H Z H on each qubit, marking |11>
    c = Circuit()
    for layer in (c.h, c.z, c.h):
        step = c.depth
        layer(0, step=step)
        layer(1, step=step)
    return c


def _qft():
    c = Circuit()
    for q in range(3):
        c.h(q, step=0)
    return c.cx(0, 1).cx(1, 2)


def _vqe():
    c = Circuit().h(0).h(1, step=0).cx(0, 1)
    c.rx(0, math.pi / 2)
    c.ry(1, math.pi / 2, step=c.depth - 1)
    return c


def _qaoa():
    c = Circuit().h(0).h(1, step=0).cx(0, 1)
    c.rx(0, math.pi / 2)
    c.rx(1, math.pi / 2, step=c.depth - 1)
    return c


TEMPLATES: dict[str, Template] = {t.name: t for t in (
    Template(
        "superposition", "Hadamard puts one qubit in an equal superposition of |0> and |1>",
        1, _superposition, "beginner", 1, ("superposition", "hadamard", "single-qubit"),
    ),
    Template(
        "pauli", "X, Y then Z on one qubit",
        1, _pauli, "beginner", 2, ("pauli-gates", "single-qubit", "rotations"),
    ),
    Template(
        "bell", "Bell state (|00> + |11>)/sqrt(2) from H and CNOT",
        2, _bell, "intermediate", 3, ("entanglement", "bell-state", "multi-qubit", "cnot"),
    ),
    Template(
        "interference", "H Z H: the two paths interfere so only |1> survives",
        1, _interference, "intermediate", 3, ("interference", "wave-behavior", "hadamard", "phase"),
    ),
    Template(
        "coin_flip", "RY(pi/2) gives a fair quantum coin",
        1, _coin_flip, "intermediate", 2, ("randomness", "superposition", "cryptography"),
    ),
    Template(
        "ghz", "Three-qubit GHZ state (|000> + |111>)/sqrt(2)",
        3, _ghz, "intermediate", 3, ("entanglement", "ghz", "multi-qubit", "cnot"),
    ),
    Template(
        "toffoli", "Both controls set, so CCNOT flips the target: |110> -> |111>",
        3, _toffoli, "educational", 3, ("toffoli", "ccnot", "reversible-logic", "multi-qubit"),
    ),
    Template(
        "grover", "Two-qubit Grover search: amplitude amplification finds the marked item |11>",
        2, _grover, "advanced", 4, ("grover", "search-algorithm", "amplitude-amplification"),
    ),
    Template(
        "qft", "Simplified three-qubit quantum Fourier transform: Hadamard layer then a CNOT chain",
        3, _qft, "advanced", 5, ("fourier-transform", "phase-estimation", "shor-algorithm"),
    ),
    Template(
        "vqe", "Variational quantum eigensolver ansatz: entangling layer then RX/RY parameters",
        2, _vqe, "algorithm", 4, ("vqe", "hybrid-algorithm", "chemistry", "optimization"),
    ),
    Template(
        "qaoa", "One QAOA layer for two-node max-cut: cost CNOT then RX mixers",
        2, _qaoa, "algorithm", 4, ("qaoa", "optimization", "max-cut", "combinatorial"),
    ),
)}


def get_template(name: str) -> Template:
    try:
        return TEMPLATES[name]
    except KeyError:
        raise KeyError(f"unknown template {name!r}; choose from {sorted(TEMPLATES)}") from None


def templates_by_category(category: str) -> list[Template]:
    if category not in CATEGORIES:
        raise ValueError(f"unknown category {category!r}; choose from {list(CATEGORIES)}")
    return [t for t in TEMPLATES.values() if t.category == category]


def templates_by_difficulty(max_difficulty: int) -> list[Template]:
    """Templates at or below ``max_difficulty``, easiest first."""
    found = [t for t in TEMPLATES.values() if t.difficulty <= max_difficulty]
    return sorted(found, key=lambda t: t.difficulty)


def search_templates(query: str) -> list[Template]:
    """Case-insensitive substring match on name, description and tags."""
    return [t for t in TEMPLATES.values() if t.matches(query)]
