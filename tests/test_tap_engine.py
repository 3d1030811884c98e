import pytest

from cw.errors import InvalidInput
from cw.messages import PlayCue, Transmit
from cw.tap_engine import TapEngine, IDLE, ACCUMULATING

from conftest import tap


def test_single_dot_decodes_to_e(engine, scheduler, effects):
    tap(engine, scheduler, ".", gap_ms=0)
    assert engine.pending == "."
    assert engine.state == ACCUMULATING

    scheduler.advance(800)
    assert engine.pending == ""
    assert engine.transcript == "E"
    assert engine.state == IDLE
    assert effects == [Transmit(last_symbol=".", code=".", transcript="E")]


def test_multi_symbol_code_decodes_to_c(engine, scheduler, effects):
    for s in "-.-.":
        tap(engine, scheduler, s)
    scheduler.advance(800)
    assert engine.transcript == "C"
    assert engine.pending == ""
    assert effects == [Transmit(last_symbol=".", code="-.-.", transcript="C")]


def test_transmit_carries_cumulative_transcript(engine, scheduler, effects):
    for s in "...":
        tap(engine, scheduler, s)
    scheduler.advance(800)
    for s in "---":
        tap(engine, scheduler, s)
    scheduler.advance(800)
    assert engine.transcript == "SO"
    assert effects[-1] == Transmit(last_symbol="-", code="---", transcript="SO")


def test_unmatched_sequence_is_cleared_by_stale_timer(engine, scheduler, effects):
    for s in ".----.":
        engine.add_symbol(s)
    scheduler.advance(800)
    # nessun match: la sequenza resta lì
    assert engine.pending == ".----."
    assert engine.transcript == ""

    scheduler.advance(1199)
    assert engine.pending == ".----."
    scheduler.advance(1)
    assert engine.pending == ""
    assert engine.transcript == ""
    assert effects == []


def test_five_symbol_sequence_without_decode_is_discarded(session, scheduler, effects):
    # lookup che non trova mai nulla: solo lo stale timer agisce
    engine = TapEngine(session, scheduler, on_effects=effects.extend, lookup=lambda code: None)
    for s in ".----":
        engine.add_symbol(s)
    scheduler.advance(2000)
    assert engine.pending == ""
    assert engine.transcript == ""
    assert effects == []


def test_new_symbol_supersedes_previous_timers(engine, scheduler, effects):
    engine.add_symbol(".")
    scheduler.advance(700)
    engine.add_symbol(".")
    assert engine.timers_outstanding() == 2
    assert len(scheduler.pending()) == 2

    scheduler.advance(700)      # 1400 ms dal primo simbolo: il primo decode non scatta
    assert engine.transcript == ""
    assert engine.pending == ".."

    scheduler.advance(100)
    assert engine.transcript == "I"
    assert effects == [Transmit(last_symbol=".", code="..", transcript="I")]


def test_at_most_one_timer_pair(engine, scheduler):
    for s in "-.--":
        engine.add_symbol(s)
        assert len(scheduler.pending()) == 2
    assert sum(1 for h in scheduler.handles if h.cancelled) == 6


def test_stale_timer_fires_1200_ms_after_decode(engine, scheduler):
    engine.add_symbol("-")
    due = sorted(h.due for h in scheduler.pending())
    assert due == [800, 2000]


def test_late_timer_from_old_generation_is_a_noop(engine, scheduler, session):
    engine.add_symbol(".")
    old = list(scheduler.pending())
    engine.add_symbol("-")
    # simula una cancellazione imperfetta: il vecchio decode scatta comunque
    old[0].callback()
    old[1].callback()
    assert engine.pending == ".-"
    assert engine.transcript == ""

    scheduler.advance(800)
    assert engine.transcript == "A"


def test_decode_uses_snapshot_taken_when_armed(engine, scheduler, session):
    engine.add_symbol("-")
    decode = min(scheduler.pending(), key=lambda h: h.due)
    # la sequenza viva cambia senza riarmare i timer
    session.pending.append(".")
    decode.fired = True
    decode.callback()
    assert engine.transcript == "T"


def test_clear_mid_accumulation_cancels_timers(engine, scheduler, effects, session):
    tap(engine, scheduler, ".")
    scheduler.advance(800)
    tap(engine, scheduler, "-")
    assert engine.transcript == "E"
    assert engine.pending == "-"

    engine.clear()
    assert engine.pending == ""
    assert engine.transcript == ""
    assert engine.timers_outstanding() == 0
    assert scheduler.pending() == []

    scheduler.advance(5000)
    assert engine.transcript == ""
    assert effects == [Transmit(last_symbol=".", code=".", transcript="E")]


def test_press_in_plays_short_cue_and_suspends_timers(engine, scheduler):
    engine.add_symbol(".")
    out = engine.press_in(scheduler.now)
    assert out == [PlayCue("short")]
    assert scheduler.pending() == []

    # pressione tenuta oltre gli 800 ms: niente decodifica a metà
    scheduler.advance(1000)
    assert engine.transcript == ""
    engine.press_out(scheduler.now)
    assert engine.pending == ".-"
    scheduler.advance(800)
    assert engine.transcript == "A"


def test_press_out_classifies_duration(engine, scheduler):
    engine.press_in(1000.0)
    engine.press_out(1199.0)
    engine.press_in(1300.0)
    engine.press_out(1500.0)
    assert engine.pending == ".-"


def test_zero_length_tap_is_a_dot(engine):
    engine.press_in(500.0)
    engine.press_out(500.0)
    assert engine.pending == "."


def test_release_without_press_is_invalid(engine, scheduler):
    with pytest.raises(InvalidInput):
        engine.press_out(100.0)
    assert engine.pending == ""
    assert scheduler.pending() == []


def test_negative_duration_is_rejected_without_appending(engine):
    engine.press_in(1000.0)
    with pytest.raises(InvalidInput):
        engine.press_out(900.0)
    assert engine.pending == ""
    assert engine.is_pressed
    engine.press_out(1050.0)
    assert engine.pending == "."


def test_non_numeric_release_time_is_rejected(engine):
    engine.press_in(1000.0)
    with pytest.raises(InvalidInput):
        engine.press_out("later")
    assert engine.pending == ""


def test_add_symbol_rejects_unknown_symbols(engine):
    with pytest.raises(InvalidInput):
        engine.add_symbol("x")
    assert engine.pending == ""


def test_effect_sink_errors_do_not_break_engine(session, scheduler):
    def boom(effects):
        raise RuntimeError("transport exploded")

    engine = TapEngine(session, scheduler, on_effects=boom)
    engine.add_symbol(".")
    scheduler.advance(800)
    assert engine.transcript == "E"
    assert engine.pending == ""


def test_custom_timings(session, scheduler, effects):
    engine = TapEngine(session, scheduler, on_effects=effects.extend,
                       dash_threshold_ms=100, decode_delay_ms=300, stale_delay_ms=600)
    engine.press_in(0.0)
    engine.press_out(150.0)
    assert engine.pending == "-"
    scheduler.advance(300)
    assert engine.transcript == "T"
