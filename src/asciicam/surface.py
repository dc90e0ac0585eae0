from __future__ import annotations

from pathlib import Path
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from asciicam.errors import SurfaceError

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


class Surface(Protocol):
    """Drawing target for a rendered frame.

    Opacity is mutable state carried between draw calls; whoever drives the
    surface must reset it after each glyph.
    """

    def resize(self, width: int, height: int) -> None: ...

    def fill_background(self, colour: RGB) -> None: ...

    def set_font(self, size: int) -> None: ...

    def set_opacity(self, alpha: float) -> None: ...

    def draw_glyph(self, x: int, y: int, glyph: str, colour: RGBA) -> None:
        """Draw one glyph with its top-left corner at pixel (x, y)."""
        ...


class ImageSurface:
    """Surface backed by a Pillow RGB image.

    Glyphs are rendered as coverage masks and pasted through them, so the
    colour's alpha times the current opacity blends over what is already drawn.
    """

    def __init__(self, font_path: str | Path | None = None):
        self.font_path = font_path
        self.image = Image.new("RGB", (1, 1))
        self.font: ImageFont.FreeTypeFont | ImageFont.ImageFont | None = None
        self.opacity = 1.0

    def resize(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise SurfaceError(f"Cannot resize surface to {width}x{height}")
        try:
            self.image = Image.new("RGB", (width, height))
        except (ValueError, MemoryError) as exc:
            raise SurfaceError(f"Cannot allocate a {width}x{height} surface: {exc}") from exc

    def fill_background(self, colour: RGB) -> None:
        self.image.paste(tuple(colour), (0, 0, self.image.width, self.image.height))

    def set_font(self, size: int) -> None:
        try:
            if self.font_path is not None:
                self.font = ImageFont.truetype(str(self.font_path), size)
            else:
                self.font = ImageFont.load_default(size=size)
        except OSError as exc:
            raise SurfaceError(f"Cannot load font {self.font_path or 'default'} at size {size}: {exc}") from exc

    def set_opacity(self, alpha: float) -> None:
        self.opacity = min(max(alpha, 0.0), 1.0)

    def _glyph_mask(self, glyph: str) -> Image.Image:
        """Coverage of one glyph as an "L" image anchored at its top-left corner."""
        _, _, right, bottom = ImageDraw.Draw(Image.new("L", (1, 1))).textbbox((0, 0), glyph, font=self.font)
        mask = Image.new("L", (max(int(right), 1), max(int(bottom), 1)), 0)
        ImageDraw.Draw(mask).text((0, 0), glyph, fill=255, font=self.font)
        return mask

    def draw_glyph(self, x: int, y: int, glyph: str, colour: RGBA) -> None:
        if self.font is None:
            raise SurfaceError("set_font must be called before drawing")
        r, g, b, a = colour
        scale = a / 255.0 * self.opacity
        try:
            mask = self._glyph_mask(glyph)
            if scale < 1.0:
                mask = mask.point(lambda v: round(v * scale))
            self.image.paste(Image.new("RGB", mask.size, (r, g, b)), (x, y), mask)
        except (OSError, ValueError) as exc:
            raise SurfaceError(f"Cannot draw {glyph!r} at ({x}, {y}): {exc}") from exc

    def save(self, path: str | Path) -> None:
        try:
            self.image.save(path)
        except (OSError, ValueError) as exc:
            raise SurfaceError(f"Cannot save surface to {path}: {exc}") from exc
