import pytest

from loopdeck.config import DEFAULT_SECTIONS
from loopdeck.ui import DEFAULT_THEME, DrawContext, HELP_TEXT, SectionView, draw_deck
from loopdeck.ui.draw import SHAPE_ELLIPSE

from conftest import make_section


@pytest.fixture
def section(engine):
    return make_section(engine, raw=[255.0] * 8 + [0.0] * 24)


def _draw(snap):
    ctx = DrawContext(960, 540)
    SectionView().draw(ctx, snap)
    return ctx.finalize()


def test_inactive_panel(section):
    batch = _draw(section.snapshot())

    # background + 16 bars
    assert batch.quad_count == 17
    background = batch.quads[0]
    assert (background.x, background.y, background.w, background.h) == (60, 80, 260, 160)
    assert background.color == section.base_color
    assert background.radius == DEFAULT_THEME.corner_radius


def test_title_shows_name_and_genre(section):
    batch = _draw(section.snapshot())
    assert [t.text for t in batch.texts] == ["Sax Corner — Jazz"]
    assert (batch.texts[0].x, batch.texts[0].y) == (70, 88)


def test_active_panel_has_glow(section):
    section.start()
    batch = _draw(section.snapshot())
    assert batch.quad_count == 18
    assert batch.quads[0].color == section.active_color

    glow = batch.quads[-1]
    width = DEFAULT_THEME.glow_width
    assert glow.stroke == width
    assert (glow.x, glow.y) == (60 - width / 2, 80 - width / 2)
    assert (glow.w, glow.h) == (260 + width, 160 + width)
    # Rounded like the panel underneath
    assert glow.radius == DEFAULT_THEME.corner_radius + width / 2


def test_pulse_brightens_blue(engine):
    section = make_section(engine, level=1.0)
    for _ in range(50):
        section.update()
    r, g, b, a = _draw(section.snapshot()).quads[0].color
    base = section.base_color
    assert (r, g) == (base[0], base[1])
    assert b == pytest.approx(min(1.0, base[2] + section.pulse * 80 / 255))


def test_bars_follow_equalizer(section):
    section.update()
    bars = SectionView().bar_rects(section.snapshot())

    assert len(bars) == 16
    assert bars[0].h == pytest.approx(80.0)
    assert bars[-1].h == pytest.approx(4.0)
    # Bars sit on a common baseline inside the panel
    assert all(b.bottom == pytest.approx(160 - 14) for b in bars)
    assert bars[0].x == 10
    assert bars[1].x - bars[0].x == pytest.approx(240 / 16)


def test_draw_deck_layers(engine):
    sections = [make_section(engine, config=c) for c in DEFAULT_SECTIONS]
    ctx = DrawContext(960, 540)

    draw_deck(ctx, [s.snapshot() for s in sections], frame_id=10)
    batch = ctx.finalize()

    ellipses = [q for q in batch.quads if q.shape == SHAPE_ELLIPSE]
    assert len(ellipses) == 6
    # Ambient lights are drawn beneath the panels
    assert max(q.z_index for q in ellipses) < min(q.z_index for q in batch.quads
                                                   if q.shape != SHAPE_ELLIPSE)
    assert batch.quad_count == 6 + 3 * 17
    assert batch.texts[-1].text == HELP_TEXT
    assert batch.texts[-1].y == 540 - 24
