from __future__ import annotations

from dataclasses import dataclass

from termotype.clock import RealClock, elapsed_since


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t


def test_real_clock_is_monotonic() -> None:
    clock = RealClock()
    readings = [clock.now() for _ in range(50)]
    assert readings == sorted(readings)
    assert clock.elapsed_since(readings[0]) >= 0.0


def test_elapsed_since_saturates_at_zero() -> None:
    clock = FakeClock(t=5.0)
    assert elapsed_since(clock, 2.0) == 3.0
    assert elapsed_since(clock, 9.0) == 0.0
