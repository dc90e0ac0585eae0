from dataclasses import dataclass
from enum import Enum

from asciicam.errors import ConfigurationError

# Density ramps run from the densest glyph to the sparsest
DETAILED = "$@B%8&WM#*oahkbdpqwmZO0QLCJUYXzcvunxrjft/\\|()1{}[]?-_+~<>i!lI;:,\"^`'. "
STANDARD = "@%#*+=-:. "
BLOCKS = "█▓▒░ "
BINARY = "101010 "
HEX = "0123456789ABCDEF "

# Half-width katakana
MATRIX = "ﾊﾐﾋｰｳｼﾅﾓﾆｻﾜﾂｵﾘｱﾎﾃﾏｹﾒｴｶｷﾑﾕﾗｾﾈｽﾀﾇﾍ"

# Latin-1 supplement symbols and letters: U+00A1-U+00FF, minus the soft hyphen
GLITCH = "".join(chr(i) for i in range(0xA1, 0x100) if i != 0xAD)

# Runic: U+16A0-U+16F0
RUNES = "".join(chr(i) for i in range(0x16A0, 0x16F1))

# Arrows: U+2190-U+21DB
ARROWS = "".join(chr(i) for i in range(0x2190, 0x21DC))

# Box drawing, light and double lines
CIRCUIT = "─│┌┐└┘├┤┬┴┼═║╒╓╔╕╖╗╘╙╚╛╜╝╞╟╠╡╢╣╤╥╦╧╨╩╪╫╬"

DEFAULT_CHARSET = "detailed"
MANUAL = "manual"

DENSITY_PRESETS = {
    "detailed": DETAILED,
    "standard": STANDARD,
    "blocks": BLOCKS,
    "binary": BINARY,
    "hex": HEX,
}

PATTERN_PRESETS = {
    "matrix": MATRIX,
    "glitch": GLITCH,
    "runes": RUNES,
    "arrows": ARROWS,
    "circuit": CIRCUIT,
}

PRESET_NAMES = sorted([*DENSITY_PRESETS, *PATTERN_PRESETS, MANUAL])


class GlyphMode(Enum):
    DENSITY = "density"  # brightness picks the glyph
    PATTERN = "pattern"  # position picks the glyph, brightness drives opacity


@dataclass(frozen=True)
class CharsetTable:
    chars: tuple[str, ...]
    mode: GlyphMode

    def __len__(self) -> int:
        return len(self.chars)


def resolve_charset(name: str, manual: str = "") -> CharsetTable:
    """Turn a charset selector into its glyph ramp and mapping mode."""
    if name == MANUAL:
        if not manual:
            raise ConfigurationError("charset 'manual' needs a non-empty manual_char")
        return CharsetTable(tuple(manual), GlyphMode.PATTERN)
    if name in PATTERN_PRESETS:
        return CharsetTable(tuple(PATTERN_PRESETS[name]), GlyphMode.PATTERN)
    if name in DENSITY_PRESETS:
        return CharsetTable(tuple(DENSITY_PRESETS[name]), GlyphMode.DENSITY)
    raise ConfigurationError(f"Unknown charset {name!r}, expected one of: {', '.join(PRESET_NAMES)}")
