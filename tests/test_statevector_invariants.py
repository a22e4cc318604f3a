import math

import numpy as np

from qassist.circuit import Circuit
from qassist.config import SimulatorConfig
from qassist.simulator import run_circuit, simulate_statevector


def test_empty_circuit_is_zero_state():
    res = run_circuit(Circuit(), 3)
    assert res.state.shape == (8,)
    assert np.allclose(res.state, np.array([1, 0, 0, 0, 0, 0, 0, 0], dtype=complex))
    assert res.is_empty
    assert res.trusted


def test_x_on_qubit0_flips_msb():
    # qubit 0 is the most significant bit, so |100> is index 4 for 3 qubits
    c = Circuit()
    c.x(0)
    psi = simulate_statevector(c, 3)

    expected = np.zeros(8, dtype=complex)
    expected[4] = 1.0
    assert np.allclose(psi, expected)


def test_h_on_single_qubit_gives_half_half_probs():
    c = Circuit()
    c.h(0)
    res = run_circuit(c, 1)

    probs = res.probabilities()
    assert set(probs) == {"0", "1"}
    assert math.isclose(probs["0"], 0.5, abs_tol=1e-12)
    assert math.isclose(probs["1"], 0.5, abs_tol=1e-12)


def test_bell_state_from_h1_cnot_1_0():
    c = Circuit()
    c.h(1)
    c.cx(1, 0)

    psi = simulate_statevector(c, 2)

    s = 1 / np.sqrt(2)
    assert np.allclose(psi, np.array([s, 0, 0, s], dtype=complex), atol=1e-12)


def test_bell_state_from_h0_cnot_0_1():
    c = Circuit()
    c.h(0)
    c.cx(0, 1)

    probs = np.abs(simulate_statevector(c, 2)) ** 2

    assert np.isclose(probs[0], 0.5, atol=1e-12)
    assert np.isclose(probs[3], 0.5, atol=1e-12)
    assert np.isclose(probs[1], 0.0, atol=1e-12)
    assert np.isclose(probs[2], 0.0, atol=1e-12)


def test_x_twice_is_identity():
    c = Circuit()
    c.h(0)
    c.ry(1, 0.3)
    before = simulate_statevector(c, 2)

    c.x(1)
    c.x(1)
    after = simulate_statevector(c, 2)

    assert np.allclose(after, before, atol=1e-12)


def test_h_twice_returns_zero():
    c = Circuit()
    c.h(0)
    c.h(0)
    psi = simulate_statevector(c, 1)
    assert np.allclose(psi, np.array([1, 0], dtype=complex), atol=1e-12)


def test_rx_pi_on_zero_gives_minus_i():
    c = Circuit()
    c.rx(0, np.pi)
    res = run_circuit(c, 1)

    amps = res.amplitudes()
    assert math.isclose(amps[0].re, 0.0, abs_tol=1e-12)
    assert math.isclose(amps[0].im, 0.0, abs_tol=1e-12)
    assert math.isclose(amps[1].re, 0.0, abs_tol=1e-12)
    assert math.isclose(amps[1].im, -1.0, abs_tol=1e-12)


def test_ry_pi_on_zero_is_real_one():
    c = Circuit()
    c.ry(0, np.pi)
    psi = simulate_statevector(c, 1)

    assert np.allclose(psi, np.array([0, 1], dtype=complex), atol=1e-12)
    assert np.allclose(psi.imag, 0.0)


def test_z_after_x_gives_minus_one():
    c = Circuit()
    c.x(0)
    c.z(0)
    psi = simulate_statevector(c, 1)
    assert np.allclose(psi, np.array([0, -1], dtype=complex))


def test_toffoli_deterministic_mapping_110_to_111():
    c = Circuit()
    c.x(0)
    c.x(1, step=0)   # prepares |110>
    c.ccx(0, 1, 2)   # flips qubit 2 iff q0=q1=1 => |111>

    psi = simulate_statevector(c, 3)

    expected = np.zeros(8, dtype=complex)
    expected[7] = 1.0
    assert np.allclose(psi, expected)


def test_norm_stays_one_after_every_gate():
    rng = np.random.default_rng(11)
    n = 4
    c = Circuit()
    for _ in range(30):
        kind = rng.integers(0, 6)
        q = [int(v) for v in rng.permutation(n)[:3]]
        if kind == 0:
            c.h(q[0])
        elif kind == 1:
            c.y(q[0])
        elif kind == 2:
            c.rx(q[0], float(rng.uniform(-np.pi, np.pi)))
        elif kind == 3:
            c.rz(q[0], float(rng.uniform(-np.pi, np.pi)))
        elif kind == 4:
            c.cx(q[0], q[1])
        else:
            c.ccx(q[0], q[1], q[2])

    # check_norm asserts the invariant after each applied gate
    res = run_circuit(c, n, config=SimulatorConfig(check_norm=True))

    assert res.applied == 30
    assert np.isclose(np.sum(np.abs(res.state) ** 2), 1.0, atol=1e-6)
