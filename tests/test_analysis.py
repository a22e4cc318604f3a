from qassist.analysis import cancellation_hints, circuit_stats, validate_circuit
from qassist.circuit import Circuit
from qassist.config import SimulatorConfig
from qassist.simulator import IssueKind, run_circuit


def test_validate_matches_run_issues():
    wire = [
        [{"type": "H", "targets": [0]}, {"type": "X", "targets": [0]}],
        [{"type": "RX", "targets": [1]}],
        [{"type": "CNOT", "targets": [0, 7]}],
        [{"type": "BOGUS", "targets": [0]}],
    ]
    issues = validate_circuit(wire, 2)

    assert [i.kind for i in issues] == [
        IssueKind.SHARED_QUBIT,
        IssueKind.MISSING_PARAMETER,
        IssueKind.QUBIT_RANGE,
        IssueKind.STRUCTURE,
    ]
    assert [(i.step, i.index) for i in issues] == [(0, 1), (1, 0), (2, 0), (3, 0)]
    assert issues == list(run_circuit(wire, 2).issues)


def test_validate_respects_config():
    wire = [[{"type": "RZ", "targets": [0]}]]
    issues = validate_circuit(wire, 1, SimulatorConfig(substitute_missing_angle=False))
    assert issues[0].skipped


def test_validate_clean_circuit():
    assert validate_circuit(Circuit().h(0).cx(0, 1), 2) == []


def test_stats():
    c = Circuit().h(0).cx(0, 2)
    c.x(1, step=0)
    stats = circuit_stats(c)

    assert stats.total_gates == 3
    assert stats.depth == 2
    assert stats.width == 3
    assert stats.complexity == "Simple"


def test_stats_ignores_trailing_empty_steps():
    c = Circuit()
    c.h(0, step=0)
    c.steps.append([])
    assert circuit_stats(c).depth == 1


def test_stats_complexity_bands():
    def sized(n):
        c = Circuit()
        for _ in range(n):
            c.h(0)
        return circuit_stats(c).complexity

    assert sized(5) == "Simple"
    assert sized(6) == "Intermediate"
    assert sized(11) == "Moderate"
    assert sized(21) == "Complex"


def test_cancellation_hints():
    c = Circuit().h(0).h(0).cx(0, 1).cx(0, 1).cx(1, 0).rx(0, 0.5).rx(0, 0.5)
    hints = cancellation_hints(c)

    assert len(hints) == 2
    assert hints[0].startswith("H on [0] in steps 0 and 1")
    assert hints[1].startswith("CNOT on [0, 1] in steps 2 and 3")


def test_many_hadamards_get_a_note():
    assert cancellation_hints(Circuit().h(0).x(0).h(0)) == []

    c = Circuit().h(0).x(0).h(0).x(0).h(1)
    hints = cancellation_hints(c)
    assert len(hints) == 1
    assert hints[0].startswith("3 Hadamard gates")
