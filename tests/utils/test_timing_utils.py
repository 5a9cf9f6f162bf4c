import pytest

from utils.timing import PhaseTimer


def test_phase_timer_records_phase_and_context():
    timer = PhaseTimer({"plant": "Monstera"})

    with timer.measure("render", {"blocks": 9}):
        pass

    with timer.measure("pack"):
        pass

    entries = timer.as_list()
    assert len(entries) == 2

    first, second = entries
    assert first["phase"] == "render"
    assert first["plant"] == "Monstera"
    assert first["blocks"] == 9
    assert first["duration"] >= 0

    assert second["phase"] == "pack"
    assert second["plant"] == "Monstera"
    assert "blocks" not in second


def test_failed_phase_is_still_recorded():
    timer = PhaseTimer()

    with pytest.raises(RuntimeError):
        with timer.measure("emit"):
            raise RuntimeError("writer failed")

    assert [entry["phase"] for entry in timer.as_list()] == ["emit"]


def test_durations_total_repeated_phases():
    timer = PhaseTimer()
    for _ in range(3):
        with timer.measure("extract"):
            pass

    durations = timer.durations()
    assert list(durations) == ["extract"]
    assert durations["extract"] == pytest.approx(sum(e["duration"] for e in timer.as_list()))
