from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import numpy as np
from loguru import logger

from asciicam.colour import rainbow_phase, resolve_colours
from asciicam.dither import add_noise, floyd_steinberg
from asciicam.edges import detect_edges
from asciicam.frame import Frame, cell_size, grid_size
from asciicam.glyphs import force_edges, map_glyphs
from asciicam.options import ColorMode, DitherMode, EdgeMode, Options
from asciicam.sampling import adjust_contrast, sample_frame
from asciicam.surface import RGBA, Surface

BACKGROUND = (0, 0, 0)


@dataclass(frozen=True)
class DrawCommand:
    column: int
    row: int
    x: int  # pixel position of the cell's top-left corner
    y: int
    glyph: str
    colour: RGBA
    opacity: float  # surface opacity while drawing; 1.0 when alpha is embedded in colour


@dataclass
class Render:
    columns: int
    rows: int
    cell_width: int
    cell_height: int
    commands: list[DrawCommand] = field(default_factory=list)

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.columns * self.cell_width, self.rows * self.cell_height


def _coerce_options(options: Options | Mapping[str, Any]) -> Options:
    if isinstance(options, Options):
        return options
    return Options.parse(options)


def build_commands(
    frame: Frame,
    options: Options | Mapping[str, Any],
    *,
    rng: np.random.Generator | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Render:
    """Run every processing phase over one frame and return the draw commands in row-major order.

    Phases run over whole grids in a fixed order: sample, contrast, edges,
    dither, glyph selection, colour. Edge detection sees the luminance before
    dithering touches it.
    """
    options = _coerce_options(options)
    columns, rows = grid_size(frame.width, frame.height, options.ascii_width)
    cell_width, cell_height = cell_size(options.zoom)
    logger.debug("Rendering {}x{} frame as {}x{} cells", frame.width, frame.height, columns, rows)

    sampled = sample_frame(frame, columns, rows, invert=options.invert)
    luminance = np.where(sampled.valid, adjust_contrast(sampled.luminance, options.contrast, options.brightness), 0.0)

    if options.edge_method is EdgeMode.SOBEL:
        edges = detect_edges(luminance, options.edge_threshold)
    else:
        edges = np.zeros(luminance.shape, dtype=bool)

    dither_mode = options.dither_mode
    if dither_mode is DitherMode.FLOYD:
        luminance = floyd_steinberg(luminance)
    elif dither_mode is DitherMode.NOISE:
        luminance = add_noise(luminance, rng if rng is not None else np.random.default_rng())

    luminance = force_edges(luminance, edges)

    table = options.charset_table
    glyphs = map_glyphs(luminance, table, ignore_white=options.ignore_white)
    phase = rainbow_phase(clock) if options.color_mode is ColorMode.RAINBOW else 0.0
    colours = resolve_colours(options.color_mode, glyphs.alpha, sampled.colours, options.primary_color, phase)

    commands = []
    for y in range(rows):
        for x in range(columns):
            if not glyphs.visible[y, x]:
                continue
            commands.append(
                DrawCommand(
                    column=x,
                    row=y,
                    x=x * cell_width,
                    y=y * cell_height,
                    glyph=table.chars[glyphs.indices[y, x]],
                    colour=tuple(int(c) for c in colours.rgba[y, x]),
                    opacity=float(colours.opacity[y, x]),
                )
            )
    logger.debug("{} of {} cells drawn", len(commands), rows * columns)
    return Render(columns=columns, rows=rows, cell_width=cell_width, cell_height=cell_height, commands=commands)


def emit(render: Render, surface: Surface) -> None:
    """Size the surface, clear it, then issue every command in order."""
    width, height = render.canvas_size
    surface.resize(width, height)
    surface.fill_background(BACKGROUND)
    surface.set_font(render.cell_height)
    for command in render.commands:
        surface.set_opacity(command.opacity)
        surface.draw_glyph(command.x, command.y, command.glyph, command.colour)
        surface.set_opacity(1.0)


def render_frame(
    frame: Frame,
    options: Options | Mapping[str, Any],
    surface: Surface,
    *,
    rng: np.random.Generator | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Render:
    """Render one frame onto a surface.

    Options are validated and every command is built before the surface is
    touched, so a ConfigurationError leaves it as it was. A SurfaceError part
    way through leaves a partially drawn frame.
    """
    render = build_commands(frame, options, rng=rng, clock=clock)
    emit(render, surface)
    return render
