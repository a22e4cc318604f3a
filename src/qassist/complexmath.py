"""
(real, imaginary) pair arithmetic used at the simulator boundary.

Internally everything is a numpy complex array; these helpers are how
amplitudes leave and enter the simulator as plain pairs.
"""
from __future__ import annotations

import numbers
from collections.abc import Iterable, Sequence
from typing import NamedTuple

import numpy as np

from .errors import ComplexOperandError


class Complex(NamedTuple):
    re: float
    im: float

    def __add__(self, other):
        return add(self, other)

    def __mul__(self, other):
        return multiply(self, other)

    def __complex__(self):
        return complex(self.re, self.im)


ZERO = Complex(0.0, 0.0)
ONE = Complex(1.0, 0.0)


def _is_real(x) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, (bool, np.bool_))


def as_complex(value) -> Complex:
    """Coerce a 2-sequence of reals (or a Complex, or a 1-D numpy row) into a Complex, failing loudly otherwise."""
    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ComplexOperandError(f"expected a 1-D (re, im) row, got shape {value.shape}")
    elif isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise ComplexOperandError(f"expected a (re, im) pair, got {value!r}")
    if len(value) != 2:
        raise ComplexOperandError(f"expected a (re, im) pair, got {len(value)} elements: {value!r}")

    re, im = value
    if not (_is_real(re) and _is_real(im)):
        raise ComplexOperandError(f"pair elements must be real numbers, got {value!r}")

    return Complex(float(re), float(im))


def add(a, b) -> Complex:
    a = as_complex(a)
    b = as_complex(b)
    return Complex(a.re + b.re, a.im + b.im)


def multiply(a, b) -> Complex:
    a = as_complex(a)
    b = as_complex(b)
    return Complex(
        a.re * b.re - a.im * b.im,
        a.re * b.im + a.im * b.re,
    )


def magnitude_squared(c) -> float:
    c = as_complex(c)
    return c.re * c.re + c.im * c.im


def to_pairs(vector) -> list[Complex]:
    vector = np.asarray(vector, dtype=complex).reshape(-1)
    return [Complex(float(z.real), float(z.imag)) for z in vector]


def from_pairs(pairs: Iterable) -> np.ndarray:
    values = [as_complex(p) for p in pairs]
    return np.array([complex(v.re, v.im) for v in values], dtype=complex)
