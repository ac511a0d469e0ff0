import numpy as np
import pytest

from conftest import SAMPLE_RATE


def test_linear_ramp_reaches_target_exactly(engine):
    gain = engine.create_gain(0.0)
    gain.amp(1.0, 10 / SAMPLE_RATE)

    first = gain.envelope(5)
    rest = gain.envelope(10)

    assert first == pytest.approx([0.1, 0.2, 0.3, 0.4, 0.5])
    assert rest[:5] == pytest.approx([0.6, 0.7, 0.8, 0.9, 1.0])
    assert np.all(rest[5:] == 1.0)
    assert gain.value == 1.0
    assert not gain.is_ramping


def test_zero_duration_jumps(engine):
    gain = engine.create_gain(0.25)
    gain.amp(0.75)
    assert gain.value == 0.75
    assert np.all(gain.envelope(4) == 0.75)


def test_new_ramp_supersedes_from_current_value(engine):
    gain = engine.create_gain(0.0)
    gain.amp(1.0, 10 / SAMPLE_RATE)
    gain.envelope(5)

    gain.amp(0.0, 5 / SAMPLE_RATE)

    assert gain.target == 0.0
    assert gain.envelope(5) == pytest.approx([0.4, 0.3, 0.2, 0.1, 0.0])


def test_process_scales_stereo_block(engine):
    gain = engine.create_gain(0.5)
    block = np.ones((4, 2), dtype=np.float32)
    assert np.all(gain.process(block) == 0.5)


def test_completion_fires_after_ramp_time(engine):
    calls = []
    gain = engine.create_gain(1.0)
    gain.amp(0.0, 0.01, on_complete=lambda: calls.append(engine.frame_clock))

    engine.process(79)
    engine.poll()
    assert calls == []

    engine.process(1)
    engine.poll()
    assert calls == [80]


def test_superseded_ramp_still_reports_completion(engine):
    calls = []
    gain = engine.create_gain(1.0)
    gain.amp(0.0, 0.01, on_complete=lambda: calls.append("first"))
    gain.amp(1.0, 0.01)

    engine.process(80)
    engine.poll()

    assert calls == ["first"]


def test_rejects_negative_gain(engine):
    gain = engine.create_gain(1.0)
    with pytest.raises(ValueError):
        gain.amp(-0.1)
