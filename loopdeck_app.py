"""
Loop Deck - moderngl-window Host

Click a section to toggle its loop; each panel pulses with its loop's
level and shows a 16-bar equalizer.

Run from project root:
    python loopdeck_app.py              # loops from assets/audio/
    python loopdeck_app.py --demo       # generated loops, no assets needed
    python loopdeck_app.py --config deck.json --assets ./my_loops

Controls:
- Click: toggle section
- SPACE: play / pause all
- R: reset (stop all)
- M: mute / unmute master
"""

from __future__ import annotations
import argparse
import logging
import sys
import time
from typing import Optional

import moderngl_window as mglw

from loopdeck.audio import AssetLoadError
from loopdeck.config import ConfigError, DeckConfig, load_config
from loopdeck.core.frame import FrameState
from loopdeck.deck import Deck
from loopdeck.ui import DeckRenderer, DrawContext, draw_deck, DEFAULT_THEME, color_rgba

logger = logging.getLogger("loopdeck.app")


class LoopDeckApp(mglw.WindowConfig):
    """Main application window."""

    gl_version = (3, 3)
    title = "Loop Deck"
    window_size = (960, 540)
    aspect_ratio = None
    resource_dir = "."

    # Assigned by main() before the window opens
    deck: Optional[Deck] = None

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        if self.deck is None:
            raise RuntimeError("LoopDeckApp.deck must be set before the window opens")

        self.ctx.enable(self.ctx.BLEND)
        self.ctx.blend_func = self.ctx.SRC_ALPHA, self.ctx.ONE_MINUS_SRC_ALPHA

        self.renderer = DeckRenderer(self.ctx)
        self.draw_ctx = DrawContext(*self.window_size)

        # Timing
        self.last_t = time.perf_counter()
        self.frame_id = 0

        if not self.deck.engine.resume():
            logger.warning("Audio device unavailable; visuals only")

        keys = self.wnd.keys
        self._key_chars = {keys.SPACE: " ", keys.R: "r", keys.M: "m"}

    def on_render(self, t: float, frame_time: float):
        """Main render loop."""
        now = time.perf_counter()
        dt = max(1e-6, now - self.last_t)
        self.last_t = now
        self.frame_id += 1
        frame = FrameState(frame_id=self.frame_id, dt=dt, t=t)

        self.deck.tick(frame)

        w, h = self.wnd.size
        self.ctx.screen.use()
        self.ctx.viewport = (0, 0, w, h)
        self.ctx.clear(*color_rgba(DEFAULT_THEME.background))

        # Sections keep their configured pixel layout; the view scales to fit
        vw, vh = self.window_size
        self.draw_ctx.clear()
        self.draw_ctx.window_width, self.draw_ctx.window_height = vw, vh
        draw_deck(self.draw_ctx, self.deck.registry.snapshots(), self.frame_id)
        self.renderer.render(self.draw_ctx.finalize(), vw, vh)

    # -------------------------------------------------------------------------
    # Input Handling
    # -------------------------------------------------------------------------

    def _to_deck_coords(self, x: float, y: float):
        w, h = self.wnd.size
        vw, vh = self.window_size
        return x * vw / max(1, w), y * vh / max(1, h)

    def on_mouse_press_event(self, x, y, button):
        self.deck.router.pointer_pressed(*self._to_deck_coords(x, y), button=button)

    def on_key_event(self, key, action, modifiers):
        if action != self.wnd.keys.ACTION_PRESS:
            return
        char = self._key_chars.get(key)
        if char is not None:
            self.deck.router.key_pressed(char)

    def on_close(self):
        self.deck.shutdown()
        self.renderer.release()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Loop Deck")
    parser.add_argument("--config", help="JSON deck config")
    parser.add_argument("--assets", help="Directory the section sound paths are relative to")
    parser.add_argument("--demo", action="store_true", help="Use generated loops instead of files")
    return parser.parse_known_args(argv)


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    args, window_args = parse_args(argv)

    try:
        config = load_config(args.config) if args.config else DeckConfig()
        if args.assets:
            config.asset_root = args.assets
        deck = Deck.create(config, demo=args.demo)
    except ConfigError as e:
        logger.error("%s", e)
        return 2
    except AssetLoadError as e:
        logger.error("%s", e)
        return 1

    LoopDeckApp.title = config.title
    LoopDeckApp.window_size = (config.width, config.height)
    LoopDeckApp.deck = deck
    mglw.run_window_config(LoopDeckApp, args=window_args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
