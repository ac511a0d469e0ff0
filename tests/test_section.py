import numpy as np
import pytest

from loopdeck.config import DEFAULT_SECTIONS
from loopdeck.core.signal import (
    SignalBridge, SIGNAL_SECTION_STARTED, SIGNAL_SECTION_STOPPED, SIGNAL_SECTION_HALTED,
)
from loopdeck.sections import AudioSection

from conftest import make_section, frames


def test_starts_inactive_and_silent(engine):
    section = make_section(engine)
    assert section.is_active is False
    assert section.pulse == 0.0
    assert section.equalizer == [0.0] * 16
    assert section.gain.value == 0.0
    assert not section.source.is_playing()


def test_start_loops_and_fades_in(engine):
    section = make_section(engine)
    section.start()

    assert section.is_active
    assert section.source.is_playing()
    assert section.gain.target == 1.0
    assert section.gain.is_ramping

    engine.process(frames(0.4))
    assert section.gain.value == pytest.approx(1.0)
    assert not section.gain.is_ramping


def test_start_resumes_suspended_engine(engine):
    assert not engine.is_running
    make_section(engine).start()
    assert engine.is_running


def test_start_with_unavailable_engine_still_activates(engine, monkeypatch):
    monkeypatch.setattr(engine, "resume", lambda: False)
    section = make_section(engine)

    section.start()

    assert section.is_active
    assert section.source.is_playing()


def test_start_is_idempotent(engine):
    section = make_section(engine)
    section.start()
    generation = section.generation
    engine.process(frames(0.1))

    section.start()

    assert section.generation == generation
    assert section.amplitude.connects == 1
    assert section.spectrum.connects == 1


def test_stop_when_inactive_is_noop(engine):
    section = make_section(engine)
    section.stop()
    assert section.generation == 0
    assert engine.pending_callbacks == 0


def test_toggle_twice_restores_state_without_duplicate_taps(engine):
    section = make_section(engine)

    section.toggle()
    section.toggle()

    assert section.is_active is False
    assert section.amplitude.connects == 1
    assert section.spectrum.connects == 1

    section.toggle()
    assert section.is_active is True
    assert section.amplitude.connects == 1


def test_stop_halts_loop_after_fade(engine):
    section = make_section(engine)
    section.start()
    engine.process(frames(0.4))

    section.stop()
    assert section.source.is_playing()

    engine.process(frames(0.4) - 1)
    assert engine.poll() == 0
    assert section.source.is_playing()

    engine.process(1)
    assert engine.poll() == 1
    assert not section.source.is_playing()
    assert section.gain.value == 0.0


def test_restart_during_fade_out_ignores_stale_completion(engine):
    section = make_section(engine)
    section.start()
    engine.process(frames(0.4))

    section.stop()
    engine.process(frames(0.2))
    section.start()

    # Fade-in supersedes the fade-out from where it got to
    assert section.gain.target == 1.0
    assert section.gain.value == pytest.approx(0.5, abs=1e-3)

    engine.process(frames(0.4))
    engine.poll()

    assert section.is_active
    assert section.source.is_playing()
    assert section.gain.value == pytest.approx(1.0)


def test_stop_start_stop_only_latest_fade_halts(engine):
    section = make_section(engine)
    section.start()
    engine.process(frames(0.4))

    section.stop()
    engine.process(frames(0.1))
    section.start()
    engine.process(frames(0.1))
    section.stop()

    # First fade-out's completion is due now but belongs to an old generation
    engine.process(frames(0.2))
    engine.poll()
    assert section.source.is_playing()

    engine.process(frames(0.2))
    engine.poll()
    assert not section.source.is_playing()


def test_pulse_converges_geometrically(engine):
    section = make_section(engine, level=1.0)
    for n in range(1, 11):
        section.update()
        assert section.pulse == pytest.approx(1 - 0.8 ** n, rel=1e-12)


def test_pulse_after_ten_ticks_at_full_level(engine):
    section = make_section(engine, level=1.0)
    for _ in range(10):
        section.update()
    assert section.pulse == pytest.approx(0.8926, abs=1e-4)


def test_pulse_stays_in_unit_interval(engine):
    section = make_section(engine)
    rng = np.random.default_rng(3)
    for level in rng.random(200):
        section.amplitude.level = float(level)
        section.update()
        assert 0.0 <= section.pulse <= 1.0


def test_out_of_range_level_is_clamped(engine):
    section = make_section(engine, level=4.0)
    section.update()
    assert section.pulse == pytest.approx(0.2)


def test_equalizer_normalizes_first_sixteen_bins(engine):
    raw = np.arange(32, dtype=float) * 8.0
    section = make_section(engine, raw=raw)

    section.update()

    assert len(section.equalizer) == 16
    assert section.equalizer == pytest.approx([i * 8.0 / 255.0 for i in range(16)])


@pytest.mark.parametrize("raw", [
    np.full(32, 255.0),
    np.full(32, -20.0),
    np.full(32, 1000.0),
    np.linspace(0, 255, 16),
    np.array([300.0] * 40),
])
def test_equalizer_always_sixteen_values_in_unit_range(engine, raw):
    section = make_section(engine, raw=raw)
    section.update()
    eq = section.equalizer
    assert len(eq) == 16
    assert all(0.0 <= v <= 1.0 for v in eq)


def test_equalizer_is_overwritten_each_update(engine):
    section = make_section(engine, raw=np.full(32, 255.0))
    section.update()
    section.spectrum.raw = np.zeros(32)
    section.update()
    assert section.equalizer == [0.0] * 16


def test_contains_is_strict(engine):
    section = make_section(engine)  # x=60, y=80, w=260, h=160
    assert section.contains(61, 81)
    assert section.contains(319.5, 239.5)
    assert not section.contains(60, 100)
    assert not section.contains(320, 100)
    assert not section.contains(100, 80)
    assert not section.contains(100, 240)
    assert not section.contains(0, 0)


def test_signals_follow_transitions(engine):
    signals = SignalBridge()
    seen = []
    signals.connect(SIGNAL_SECTION_STARTED, lambda s: seen.append(("started", s.id)))
    signals.connect(SIGNAL_SECTION_STOPPED, lambda s: seen.append(("stopped", s.id)))
    signals.connect(SIGNAL_SECTION_HALTED, lambda s: seen.append(("halted", s.id)))
    section = make_section(engine, signals=signals)

    section.start()
    section.start()
    section.stop()
    engine.process(frames(0.4))
    engine.poll()

    assert seen == [("started", "jazz1"), ("stopped", "jazz1"), ("halted", "jazz1")]


def test_snapshot_reflects_state(engine):
    section = make_section(engine, level=1.0, raw=np.full(32, 51.0))
    section.start()
    section.update()

    snap = section.snapshot()

    assert snap.is_active
    assert snap.name == "Sax Corner"
    assert snap.geometry == section.geometry
    assert snap.pulse == pytest.approx(0.2)
    assert snap.equalizer == pytest.approx((0.2,) * 16)
    assert snap.base_color == pytest.approx((0x2b / 255, 0x3a / 255, 0x67 / 255, 1.0))


def test_real_taps_follow_the_loop(engine):
    handle = engine.load_from_array("dc", np.full(4000, 0.5, dtype=np.float32))
    section = AudioSection(DEFAULT_SECTIONS[0], handle, engine)

    section.update()
    assert section.pulse == 0.0

    section.start()
    engine.process(frames(0.5))
    section.update()
    assert section.pulse == pytest.approx(0.1, abs=1e-3)
