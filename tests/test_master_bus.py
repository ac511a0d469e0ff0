import pytest

from loopdeck.core.signal import SignalBridge, SIGNAL_MASTER_MUTED, SIGNAL_MASTER_UNMUTED
from loopdeck.sections import MasterBus

from conftest import frames


def test_defaults_to_point_nine(engine):
    bus = MasterBus(engine.master)
    assert bus.gain == 0.9
    assert engine.master.value == pytest.approx(0.9)
    assert not bus.is_muted


def test_mute_ramps_down_over_point_three_seconds(engine):
    bus = MasterBus(engine.master)

    bus.toggle_mute()

    assert bus.is_muted
    assert bus.gain == 0.0
    assert engine.master.target == 0.0

    engine.process(frames(0.15))
    assert engine.master.value == pytest.approx(0.45, abs=1e-3)

    engine.process(frames(0.15))
    assert engine.master.value == 0.0


def test_unmute_restores_exact_prior_gain(engine):
    bus = MasterBus(engine.master)

    bus.toggle_mute()
    engine.process(frames(0.3))
    bus.toggle_mute()
    engine.process(frames(0.3))

    assert bus.gain == 0.9
    assert engine.master.value == 0.9
    assert not bus.is_muted


def test_unmute_restores_configured_gain(engine):
    bus = MasterBus(engine.master, gain=0.6)
    bus.toggle_mute()
    bus.toggle_mute()
    assert bus.gain == 0.6
    assert engine.master.target == 0.6


def test_unmute_mid_ramp_reverses_from_current_value(engine):
    bus = MasterBus(engine.master)
    bus.toggle_mute()
    engine.process(frames(0.1))

    bus.toggle_mute()

    assert engine.master.target == pytest.approx(0.9)
    assert engine.master.value == pytest.approx(0.6, abs=1e-3)


def test_mute_is_independent_of_sections(engine):
    bus = MasterBus(engine.master)
    bus.toggle_mute()
    assert engine.route_count == 0


def test_rejects_invalid_gain(engine):
    with pytest.raises(ValueError):
        MasterBus(engine.master, gain=0.0)
    with pytest.raises(ValueError):
        MasterBus(engine.master, gain=1.5)


def test_emits_mute_signals(engine):
    signals = SignalBridge()
    events = []
    signals.connect(SIGNAL_MASTER_MUTED, lambda g: events.append(("muted", g)))
    signals.connect(SIGNAL_MASTER_UNMUTED, lambda g: events.append(("unmuted", g)))
    bus = MasterBus(engine.master, signals=signals)

    bus.toggle_mute()
    bus.toggle_mute()

    assert events == [("muted", 0.9), ("unmuted", 0.9)]
