import json
import math

import pytest

from qassist import io
from qassist.circuit import Circuit, CNOTGate, RotationGate, SingleQubitGate
from qassist.errors import (
    CircuitError, GateStructureError, MissingParameterError, QubitIndexError,
)
from qassist.simulator import run_circuit


def test_decode_gate_variants():
    assert io.decode_gate({"type": "h", "targets": [0]}) == SingleQubitGate("H", 0)
    assert io.decode_gate({"type": "CNOT", "targets": [1, 0]}) == CNOTGate(1, 0)
    assert io.decode_gate({"type": "RZ", "targets": [0], "params": 1}) == RotationGate("RZ", 0, 1.0)


def test_decode_gate_passes_typed_gates_through():
    g = CNOTGate(0, 1)
    assert io.decode_gate(g) is g
    with pytest.raises(QubitIndexError):
        io.decode_gate(g, num_qubits=1)


def test_decode_gate_range_check_needs_num_qubits():
    raw = {"type": "X", "targets": [4]}
    assert io.decode_gate(raw).qubit == 4
    with pytest.raises(QubitIndexError) as exc:
        io.decode_gate(raw, num_qubits=4)
    assert exc.value.qubit == 4


def test_decode_gate_missing_angle():
    raw = {"type": "RX", "targets": [0]}
    with pytest.raises(MissingParameterError):
        io.decode_gate(raw)
    assert io.decode_gate(raw, default_angle=0.5).theta == 0.5


def test_decode_gate_ignores_params_on_fixed_gates():
    assert io.decode_gate({"type": "H", "targets": [0], "params": 3}) == SingleQubitGate("H", 0)


def test_decode_gate_rejects_multi_angle_params():
    with pytest.raises(GateStructureError):
        io.decode_gate({"type": "RX", "targets": [0], "params": [1.0, 2.0]})


def test_dumps_loads_keeps_the_circuit():
    c = Circuit().h(1).cx(1, 0)
    c.rz(2, 0.125, step=0)
    c.ccx(0, 1, 2)

    text = io.dumps(c)
    assert json.loads(text)["gates"][0] == [
        {"type": "H", "targets": [1]},
        {"type": "RZ", "targets": [2], "params": 0.125},
    ]
    assert io.loads(text) == c


def test_loads_is_strict():
    with pytest.raises(CircuitError):
        io.loads("{not json")
    with pytest.raises(GateStructureError):
        io.loads('{"gates": [[{"type": "H", "targets": []}]]}')
    with pytest.raises(MissingParameterError):
        io.loads('{"gates": [[{"type": "RY", "targets": [0]}]]}')


def test_circuit_from_positioned_builder_gates():
    ui = [
        {"id": 1, "type": "H", "qubit": 0, "position": 0},
        {"id": 2, "type": "CNOT", "control": 0, "target": 1, "position": 1},
        {"id": 3, "type": "MEASURE", "qubit": 0, "position": 2},
        {"id": 4, "type": "MEASURE", "qubit": 1, "position": 2},
    ]
    wire = io.circuit_from_positioned(ui)

    assert wire == {"gates": [
        [{"type": "H", "targets": [0]}],
        [{"type": "CNOT", "targets": [0, 1]}],
    ]}
    assert run_circuit(wire, 2).probabilities() == pytest.approx({"00": 0.5, "11": 0.5})


def test_circuit_from_positioned_keeps_gaps_theta_and_ccnot():
    ui = [
        {"type": "RY", "qubit": 0, "position": 2, "theta": math.pi},
        {"type": "CCNOT", "controls": [0, 1], "target": 2, "position": 3},
    ]
    wire = io.circuit_from_positioned(ui)

    assert wire["gates"][:2] == [[], []]
    assert wire["gates"][2] == [{"type": "RY", "targets": [0], "params": math.pi}]
    assert wire["gates"][3] == [{"type": "CCNOT", "targets": [0, 1, 2]}]


def test_circuit_from_positioned_incomplete_gate_is_flagged_downstream():
    wire = io.circuit_from_positioned([{"type": "CNOT", "control": 0, "position": 0}])
    assert wire == {"gates": [[{"type": "CNOT", "targets": []}]]}
    assert run_circuit(wire, 2).partial


def test_circuit_from_positioned_requires_positions():
    with pytest.raises(CircuitError):
        io.circuit_from_positioned([{"type": "H", "qubit": 0}])
    with pytest.raises(CircuitError):
        io.circuit_from_positioned("H 0")


def test_circuit_from_positioned_empty():
    assert io.circuit_from_positioned([]) == {"gates": []}
