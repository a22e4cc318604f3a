import numpy as np


def _frozen(rows) -> np.ndarray:
    m = np.array(rows, dtype=complex)
    m.setflags(write=False)
    return m


## 1 qubit gates

I = _frozen([
    [1, 0],
    [0, 1],
])

X = _frozen([
    [0, 1],
    [1, 0],
])

# Y = i X Z, the textbook convention
Y = _frozen([
    [0, -1j],
    [1j, 0],
])

Z = _frozen([
    [1, 0],
    [0, -1],
])

H = _frozen((1 / np.sqrt(2)) * np.array([
    [1, 1],
    [1, -1],
]))


def _rotation(pauli: np.ndarray, theta: float) -> np.ndarray:
    # exp(-i theta P/2) = cos(theta/2) I - i sin(theta/2) P, since P^2 = I
    half = float(theta) / 2.0
    return np.cos(half) * I - 1j * np.sin(half) * pauli


def RX(theta: float) -> np.ndarray:
    """Rotation about X; RX(pi) = -iX."""
    return _rotation(X, theta)


def RY(theta: float) -> np.ndarray:
    """Rotation about Y. Real-valued, so RY(pi/2)|0> = |+>."""
    return _rotation(Y, theta)


def RZ(theta: float) -> np.ndarray:
    """Rotation about Z: e^{-i theta/2} on |0>, e^{+i theta/2} on |1>."""
    return _rotation(Z, theta)


## 2 qubit gates

# basis order |control, target>: |00>, |01>, |10>, |11>
CNOT = _frozen([
    [1,0,0,0],
    [0,1,0,0],
    [0,0,0,1],
    [0,0,1,0],
])


FIXED = {
    "H": H,
    "X": X,
    "Y": Y,
    "Z": Z,
}

ROTATIONS = {
    "RX": RX,
    "RY": RY,
    "RZ": RZ,
}


def single_qubit_matrix(kind: str, theta: float | None = None) -> np.ndarray:
    if kind in FIXED:
        return FIXED[kind]
    if kind in ROTATIONS:
        if theta is None:
            raise ValueError(f"{kind} needs an angle")
        return ROTATIONS[kind](theta)
    raise ValueError(f"no single-qubit matrix for gate type {kind!r}")


def is_unitary(U: np.ndarray, atol: float = 1e-10) -> bool:
    U = np.asarray(U, dtype=complex)
    if U.ndim != 2 or U.shape[0] != U.shape[1]:
        return False
    return np.allclose(U.conj().T @ U, np.eye(U.shape[0]), atol=atol)
