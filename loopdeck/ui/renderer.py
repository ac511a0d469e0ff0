"""
Deck Renderer

Renders a DrawBatch to the screen with moderngl.

Quads are shaded per fragment from their local coordinates, so one
program covers plain rects, rounded rects, ellipses and outlines.
"""

from __future__ import annotations
from typing import List, TYPE_CHECKING
import numpy as np

from .draw import SHAPE_ELLIPSE

if TYPE_CHECKING:
    import moderngl
    from .draw import DrawBatch, DrawQuad


# pos(2f) + local(2f) + size(2f) + radius(1f) + shape(1f) + stroke(1f) + color(4f)
QUAD_FLOATS = 13

_QUAD_VS = """
#version 330
in vec2 in_pos;
in vec2 in_local;
in vec2 in_size;
in float in_radius;
in float in_shape;
in float in_stroke;
in vec4 in_color;

out vec2 v_local;
out vec2 v_size;
out float v_radius;
out float v_shape;
out float v_stroke;
out vec4 v_color;

uniform vec2 u_screen_size;

void main() {
    vec2 ndc = (in_pos / u_screen_size) * 2.0 - 1.0;
    ndc.y = -ndc.y;  // Top-left origin
    gl_Position = vec4(ndc, 0.0, 1.0);
    v_local = in_local;
    v_size = in_size;
    v_radius = in_radius;
    v_shape = in_shape;
    v_stroke = in_stroke;
    v_color = in_color;
}
"""

_QUAD_FS = """
#version 330
in vec2 v_local;
in vec2 v_size;
in float v_radius;
in float v_shape;
in float v_stroke;
in vec4 v_color;

out vec4 frag_color;

void main() {
    vec2 half_size = v_size * 0.5;
    vec2 p = v_local - half_size;
    float coverage = 1.0;

    if (v_shape > 0.5) {
        vec2 q = p / max(half_size, vec2(1e-4));
        float d = length(q) - 1.0;
        float aa = fwidth(d);
        coverage = 1.0 - smoothstep(-aa, aa, d);
    } else if (v_radius > 0.0 || v_stroke > 0.0) {
        vec2 q = abs(p) - (half_size - vec2(v_radius));
        float d = length(max(q, 0.0)) + min(max(q.x, q.y), 0.0) - v_radius;
        if (v_stroke > 0.0) {
            // Band of width v_stroke just inside the quad's edge
            d = abs(d + v_stroke * 0.5) - v_stroke * 0.5;
        }
        coverage = 1.0 - smoothstep(-0.75, 0.75, d);
    }

    if (coverage <= 0.0) {
        discard;
    }
    frag_color = vec4(v_color.rgb, v_color.a * coverage);
}
"""


def build_quad_vertices(quads: List['DrawQuad']) -> np.ndarray:
    """Two triangles per quad, QUAD_FLOATS floats per vertex."""
    vertices = np.zeros((len(quads) * 6, QUAD_FLOATS), dtype=np.float32)

    for i, q in enumerate(quads):
        x0, y0 = q.x, q.y
        x1, y1 = q.x + q.w, q.y + q.h
        shape = 1.0 if q.shape == SHAPE_ELLIPSE else 0.0
        extra = [q.w, q.h, q.radius, shape, q.stroke, *q.color]

        corners = [
            (x0, y0, 0.0, 0.0),
            (x1, y0, q.w, 0.0),
            (x1, y1, q.w, q.h),
            (x0, y0, 0.0, 0.0),
            (x1, y1, q.w, q.h),
            (x0, y1, 0.0, q.h),
        ]
        base = i * 6
        for j, (px, py, lx, ly) in enumerate(corners):
            vertices[base + j] = [px, py, lx, ly, *extra]

    return vertices


class DeckRenderer:
    """
    Standalone renderer for DrawBatch output.

    Creates and manages its own program and buffers; text commands are
    collected upstream but not rasterized.

    Usage:
        renderer = DeckRenderer(ctx)

        # Each frame:
        renderer.render(draw_ctx.finalize(), width, height)
    """

    def __init__(self, ctx: 'moderngl.Context'):
        self.ctx = ctx

        self._quad_prog = None

        self._quad_vbo = None
        self._quad_vao = None
        self._quad_capacity = 0

        self._initialized = False

    def _ensure_initialized(self):
        """Create GPU resources on first use."""
        if self._initialized:
            return
        self._quad_prog = self.ctx.program(vertex_shader=_QUAD_VS, fragment_shader=_QUAD_FS)
        self._initialized = True

    def _ensure_quad_buffer(self, count: int):
        needed = count * 6
        if self._quad_capacity >= needed and self._quad_vbo is not None:
            return

        new_capacity = max(needed, self._quad_capacity * 2, 256)

        if self._quad_vbo:
            self._quad_vao.release()
            self._quad_vbo.release()

        self._quad_vbo = self.ctx.buffer(reserve=new_capacity * QUAD_FLOATS * 4, dynamic=True)
        self._quad_capacity = new_capacity
        self._quad_vao = self.ctx.vertex_array(
            self._quad_prog,
            [(self._quad_vbo, "2f 2f 2f 1f 1f 1f 4f",
              "in_pos", "in_local", "in_size", "in_radius", "in_shape", "in_stroke", "in_color")],
        )

    def render(self, batch: 'DrawBatch', screen_width: int, screen_height: int):
        """Render a finalized DrawBatch. Expects blending enabled, depth test off."""
        self._ensure_initialized()

        if batch.quads:
            self._ensure_quad_buffer(len(batch.quads))
            vertices = build_quad_vertices(batch.quads)
            self._quad_vbo.write(vertices.tobytes())
            self._quad_prog["u_screen_size"].value = (screen_width, screen_height)
            self._quad_vao.render(mode=self.ctx.TRIANGLES, vertices=len(vertices))

    def release(self):
        """Release GPU resources."""
        for res in (self._quad_vao, self._quad_vbo, self._quad_prog):
            if res is not None:
                res.release()
        self._initialized = False
