from __future__ import annotations

import math

from termotype.input_tracker import InputTracker
from termotype.metrics import (
    MetricsCalculator,
    calculate_accuracy,
    calculate_cpm,
    calculate_wpm,
)


def test_wpm_formula() -> None:
    assert math.isclose(calculate_wpm(25, 60.0), 5.0)
    assert math.isclose(calculate_wpm(50, 30.0), 20.0)


def test_cpm_formula() -> None:
    assert math.isclose(calculate_cpm(100, 60.0), 100.0)
    assert math.isclose(calculate_cpm(30, 15.0), 120.0)


def test_accuracy_formula() -> None:
    assert math.isclose(calculate_accuracy(18, 2), 90.0)
    assert calculate_accuracy(10, 0) == 100.0
    assert calculate_accuracy(0, 5) == 0.0


def test_accuracy_with_nothing_judged_does_not_divide_by_zero() -> None:
    assert calculate_accuracy(0, 0) == 0.0


def test_speed_is_zero_while_elapsed_is_effectively_zero() -> None:
    assert calculate_wpm(10, 0.0) == 0.0
    assert calculate_cpm(10, 0.0) == 0.0
    assert calculate_wpm(10, 1e-9) == 0.0
    assert not math.isnan(calculate_wpm(0, 0.0))


def test_from_counts_clamps_negative_elapsed() -> None:
    m = MetricsCalculator.from_counts(correct_chars=5, incorrect_chars=0, elapsed_s=-3.0)
    assert m.elapsed_s == 0.0
    assert m.wpm == 0.0


def test_snapshot_reads_tracker_counts() -> None:
    tracker = InputTracker(["hello", "world"])
    for ch in "hellp":
        tracker.accept_char(ch)
    tracker.accept_space()

    m = MetricsCalculator().snapshot(tracker, 12.0)
    assert m.correct_chars == 5  # four letters plus the boundary
    assert m.incorrect_chars == 1
    assert m.judged_chars == 6
    assert math.isclose(m.wpm, (5 / 5.0) / (12.0 / 60.0))
    assert math.isclose(m.cpm, 5 / (12.0 / 60.0))
    assert math.isclose(m.accuracy, 100.0 * 5 / 6)
