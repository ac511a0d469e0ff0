import pytest

from loopdeck.config import DEFAULT_SECTIONS
from loopdeck.core.signal import SignalBridge, SIGNAL_KEY_DOWN, SIGNAL_POINTER_DOWN
from loopdeck.input import InputRouter
from loopdeck.sections import MasterBus, SectionRegistry

from conftest import make_section


@pytest.fixture
def router(engine):
    registry = SectionRegistry(make_section(engine, config=c) for c in DEFAULT_SECTIONS)
    return InputRouter(registry, MasterBus(engine.master))


def test_space_toggles_everything(router):
    assert router.key_pressed(" ") == "toggle_all"
    assert len(router.registry.active_sections) == 3

    router.key_pressed(" ")
    assert router.registry.active_sections == []


@pytest.mark.parametrize("char", ["r", "R"])
def test_reset_key_stops_all(router, char):
    router.key_pressed(" ")
    assert router.key_pressed(char) == "reset_all"
    assert router.registry.active_sections == []


def test_mute_key_toggles_master(router):
    router.key_pressed("m")
    assert router.master.is_muted
    router.key_pressed("M")
    assert not router.master.is_muted


def test_unbound_key_does_nothing(router):
    assert router.key_pressed("x") is None
    assert router.key_pressed("") is None
    assert router.registry.active_sections == []


def test_left_click_toggles_section_under_pointer(router):
    section = router.pointer_pressed(75, 95)
    assert section.id == "jazz1"
    assert section.is_active


def test_click_between_sections_hits_nothing(router):
    assert router.pointer_pressed(340, 100) is None
    assert router.registry.active_sections == []


def test_other_buttons_are_ignored(router):
    assert router.pointer_pressed(75, 95, button=2) is None
    assert router.registry.active_sections == []


def test_custom_key_map(engine):
    registry = SectionRegistry([make_section(engine)])
    router = InputRouter(registry, MasterBus(engine.master), key_map={"P": "toggle_all"})
    assert router.key_pressed("p") == "toggle_all"
    assert router.key_pressed(" ") is None


def test_unknown_command_in_key_map(engine):
    with pytest.raises(ValueError):
        InputRouter(SectionRegistry(), MasterBus(engine.master), key_map={"q": "quit"})


def test_emits_input_signals(engine):
    bridge = SignalBridge()
    seen = []
    bridge.connect(SIGNAL_POINTER_DOWN, lambda x, y, b: seen.append(("pointer", x, y, b)))
    bridge.connect(SIGNAL_KEY_DOWN, lambda c: seen.append(("key", c)))
    router = InputRouter(SectionRegistry(), MasterBus(engine.master), signals=bridge)

    router.pointer_pressed(5, 6)
    router.key_pressed("z")

    assert seen == [("pointer", 5, 6, 1), ("key", "z")]
