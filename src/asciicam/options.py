from enum import Enum
from pathlib import Path
from typing import Any, Mapping

import yaml
from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator, model_validator

from asciicam.charsets import DEFAULT_CHARSET, CharsetTable, resolve_charset
from asciicam.errors import ConfigurationError
from asciicam.frame import cell_size

# The contrast curve divides by (259 - contrast)
CONTRAST_SINGULARITY = 259.0


class DitherMode(str, Enum):
    FLOYD = "floyd"
    NOISE = "noise"
    NONE = "none"


class ColorMode(str, Enum):
    MONO = "mono"
    TRUE = "true"
    RAINBOW = "rainbow"


class EdgeMode(str, Enum):
    NONE = "none"
    SOBEL = "sobel"


class Options(BaseModel):
    """Per-frame rendering options.

    Every string-keyed choice is resolved here, once, so the pipeline only ever
    sees enums, a CharsetTable and an RGB triple.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    ascii_width: int = Field(default=150, ge=1, description="Number of glyph columns in the output grid.")
    brightness: float = Field(default=0.0, description="Offset added to every luminance value after contrast.")
    contrast: float = Field(
        default=0.0,
        ge=-255.0,
        lt=CONTRAST_SINGULARITY,
        description="Contrast adjustment; -255 flattens to mid grey, values approaching 259 saturate.",
    )
    dithering: bool = Field(default=True, description="Master switch for dither_algo.")
    dither_algo: DitherMode = Field(default=DitherMode.FLOYD, description="Error diffusion or uniform noise.")
    invert: bool = Field(default=False, description="Invert luminance before any adjustment.")
    ignore_white: bool = Field(default=True, description="Skip cells whose luminance ends up above 250.")
    charset: str = Field(default=DEFAULT_CHARSET, description="Preset ramp name, or 'manual' to use manual_char.")
    color_mode: ColorMode = Field(default=ColorMode.MONO, description="How each glyph is coloured.")
    edge_method: EdgeMode = Field(default=EdgeMode.NONE, description="Edge detector forcing edges to the darkest glyph.")
    edge_threshold: float = Field(default=100.0, ge=0.0, description="Sobel magnitude above which a cell is an edge.")
    zoom: float = Field(default=1.0, gt=0.0, description="Scale applied to the 7x12 base glyph cell.")
    primary_color: tuple[int, int, int] = Field(default=(0, 255, 0), description="Fill colour in mono mode.")
    manual_char: str = Field(default="", description="Custom glyph string for the 'manual' charset.")

    _charset_table: CharsetTable = PrivateAttr()

    @field_validator("primary_color", mode="before")
    @classmethod
    def parse_colour(cls, value: Any) -> Any:
        if isinstance(value, str):
            return ImageColor.getrgb(value)[:3]
        return value

    @field_validator("primary_color")
    @classmethod
    def check_channels(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        if not all(0 <= channel <= 255 for channel in value):
            raise ValueError(f"colour channels must be within 0-255, got {value}")
        return value

    @model_validator(mode="after")
    def resolve_choices(self) -> "Options":
        try:
            cell_width, cell_height = cell_size(self.zoom)
        except OverflowError as exc:
            raise ValueError(f"zoom {self.zoom} is too large") from exc
        if cell_width < 1 or cell_height < 1:
            raise ValueError(f"zoom {self.zoom} shrinks glyph cells below one pixel")
        self._charset_table = resolve_charset(self.charset, self.manual_char)
        return self

    @property
    def charset_table(self) -> CharsetTable:
        return self._charset_table

    @property
    def dither_mode(self) -> DitherMode:
        return self.dither_algo if self.dithering else DitherMode.NONE

    @classmethod
    def parse(cls, data: Mapping[str, Any]) -> "Options":
        """Validate a raw options mapping, raising ConfigurationError on any bad field."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    @classmethod
    def from_yaml(cls, path: str | Path, overrides: Mapping[str, Any] | None = None) -> "Options":
        """Load options from a YAML mapping, with optional overrides applied on top."""
        path = Path(path)
        try:
            text = path.read_bytes().decode("utf-8-sig")
            data = yaml.safe_load(text)
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            raise ConfigurationError(f"Cannot read options from {path}: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Options file {path} must contain a mapping, got {type(data).__name__}")
        return cls.parse({**data, **(overrides or {})})
