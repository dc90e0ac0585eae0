import os
import shutil
import subprocess

import numpy as np
import pytest
from PIL import Image

from asciicam.errors import SurfaceError
from asciicam.frame import Frame

MONOSPACE_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
    "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
    "/usr/share/fonts/dejavu-sans-mono-fonts/DejaVuSansMono.ttf",
)


def monospace_font_path():
    """Path of an installed monospace TrueType font, or None."""
    found = next((path for path in MONOSPACE_FONTS if os.path.exists(path)), None)
    if found or shutil.which("fc-match") is None:
        return found
    out = subprocess.run(["fc-match", "-f", "%{file}", "monospace"], capture_output=True, text=True)
    path = out.stdout.strip()
    return path if out.returncode == 0 and path.lower().endswith((".ttf", ".otf", ".ttc")) else None


FONT_PATH = monospace_font_path()
needs_font = pytest.mark.skipif(FONT_PATH is None, reason="No monospace TrueType font installed")


def make_frame(width, height, colour=(0, 0, 0)):
    """Solid-colour frame."""
    return Frame.from_image(Image.new("RGB", (width, height), colour))


def frame_from_array(rgb):
    """Frame from an (h, w, 3) uint8 array."""
    return Frame.from_image(Image.fromarray(np.asarray(rgb, dtype=np.uint8)))


class RecordingSurface:
    """Surface fake that logs every call in order."""

    def __init__(self, fail_on_draw=None):
        self.calls = []
        self.fail_on_draw = fail_on_draw
        self.draws = 0

    def resize(self, width, height):
        self.calls.append(("resize", width, height))

    def fill_background(self, colour):
        self.calls.append(("fill_background", tuple(colour)))

    def set_font(self, size):
        self.calls.append(("set_font", size))

    def set_opacity(self, alpha):
        self.calls.append(("set_opacity", alpha))

    def draw_glyph(self, x, y, glyph, colour):
        if self.fail_on_draw is not None and self.draws == self.fail_on_draw:
            raise SurfaceError("surface lost")
        self.draws += 1
        self.calls.append(("draw_glyph", x, y, glyph, tuple(colour)))


@pytest.fixture
def surface():
    return RecordingSurface()
