"""Scripted end-to-end sessions driven the way the UI loop drives the engine:
drain keystrokes, then one tick per frame, with a fake clock."""

from __future__ import annotations

from dataclasses import dataclass

from termotype.input_tracker import CharState
from termotype.typing_core import Status, TimeBound, TypingTest, WordCountBound, build_typing_test
from termotype.words import RandomWordSource, SequenceWordSource

FRAME_S = 1.0 / 60.0


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += float(dt)


def _judged_slots(engine: TypingTest) -> int:
    return sum(1 for w in engine.snapshot().words for s in w.states if s is not CharState.UNTYPED)


def test_exact_typing_of_word_count_session_is_perfect() -> None:
    seed = 11
    clock = FakeClock()
    mirror = RandomWordSource(["alpha", "beta", "gamma", "delta"], seed=seed)
    expected = [mirror.next_word() for _ in range(10)]

    engine = build_typing_test(
        clock=clock,
        mode=WordCountBound(10),
        words=["alpha", "beta", "gamma", "delta"],
        seed=seed,
    )
    assert [w.text for w in engine.snapshot().words] == expected

    for word in expected:
        for ch in word + " ":
            engine.start_or_advance(ch)
            clock.advance(FRAME_S)
            engine.tick()

    assert engine.status is Status.COMPLETED
    result = engine.take_result()
    assert result is not None
    assert result.metrics.accuracy == 100.0
    assert result.metrics.incorrect_chars == 0
    assert result.metrics.correct_chars == sum(len(w) + 1 for w in expected)


def test_judged_counter_matches_slots_throughout_messy_session() -> None:
    clock = FakeClock()
    engine = TypingTest(
        word_source=SequenceWordSource(["the", "quick", "brown", "fox"]),
        clock=clock,
        mode=TimeBound(30),
    )
    script = "thx\be " + "qiuck " + "br\bro" + "  " + "wn " + "fax"
    for ch in script:
        engine.start_or_advance(ch)
        clock.advance(0.1)
        m = engine.tick()
        assert m.correct_chars + m.incorrect_chars == _judged_slots(engine)

    assert engine.status is Status.RUNNING
    snap = engine.snapshot()
    assert snap.word_index == 3
    assert snap.char_index == 3
    assert snap.words[1].states[1] is CharState.INCORRECT


def test_time_bound_session_ends_on_tick_without_input() -> None:
    clock = FakeClock()
    engine = TypingTest(word_source=SequenceWordSource(["word"]), clock=clock, mode=TimeBound(1))
    engine.start_or_advance("w")

    frames = 0
    while engine.status is Status.RUNNING:
        clock.advance(FRAME_S)
        engine.tick()
        frames += 1
        assert frames < 200

    assert 59 <= frames <= 61
    result = engine.take_result()
    assert result is not None
    assert result.metrics.elapsed_s == 1.0
    assert engine.take_result() is None


def test_restart_after_completion_runs_a_fresh_session() -> None:
    clock = FakeClock()
    engine = TypingTest(word_source=SequenceWordSource(["ok"]), clock=clock, mode=WordCountBound(2))
    for ch in "ok ok ":
        engine.start_or_advance(ch)
    assert engine.status is Status.COMPLETED
    first = engine.take_result()
    assert first is not None

    engine.reset()
    clock.advance(5.0)
    for ch in "ox ok ":
        engine.start_or_advance(ch)
    second = engine.take_result()
    assert second is not None
    assert second.started_at_s == 5.0
    assert second.metrics.incorrect_chars == 1
    assert second.metrics.accuracy < first.metrics.accuracy
