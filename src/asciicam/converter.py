from pathlib import Path
from typing import Any, Iterable, Mapping

from PIL import Image

from asciicam.frame import Frame
from asciicam.options import Options
from asciicam.pipeline import DrawCommand, build_commands


def _effective_rgb(command: DrawCommand) -> tuple[int, int, int]:
    """Colour as it would appear over the black background."""
    r, g, b, a = command.colour
    scale = a / 255.0 * command.opacity
    return round(r * scale), round(g * scale), round(b * scale)


def _layout(commands: Iterable[DrawCommand], columns: int, rows: int) -> list[list[DrawCommand | None]]:
    grid: list[list[DrawCommand | None]] = [[None] * columns for _ in range(rows)]
    for command in commands:
        grid[command.row][command.column] = command
    return grid


def commands_to_text(commands: Iterable[DrawCommand], columns: int, rows: int, colour: bool = False) -> str:
    """Lay draw commands out as lines of text. Undrawn cells become spaces."""
    out = []
    for line in _layout(commands, columns, rows):
        if not colour:
            out.append("".join(command.glyph if command else " " for command in line))
            continue
        parts = []
        for command in line:
            if command is None:
                parts.append(" ")
                continue
            r, g, b = _effective_rgb(command)
            parts.append(f"\033[38;2;{r};{g};{b}m{command.glyph}")
        parts.append("\033[0m")
        out.append("".join(parts))
    return "\n".join(out)


def image_to_ascii(
    image: Image.Image | str | Path,
    options: Options | Mapping[str, Any] | None = None,
    colour: bool = False,
) -> str:
    if not isinstance(image, Image.Image):
        image = Image.open(image)
    render = build_commands(Frame.from_image(image), options if options is not None else Options())
    return commands_to_text(render.commands, render.columns, render.rows, colour=colour)
