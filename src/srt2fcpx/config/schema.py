import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_HEX_COLOR_RE = re.compile(r"#?(?:[0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})")

# ConfigFile key -> ConversionOptions field
CONFIG_KEY_TO_OPTION: dict[str, str] = {
    "title": "title_name",
    "fps": "frame_rate",
    "width": "width",
    "height": "height",
    "font": "font_family",
    "size": "font_size",
    "face": "font_face",
    "color": "text_color",
    "bg": "background_color",
    "stroke_color": "stroke_color",
    "stroke_width": "stroke_width",
    "format_version": "format_version",
}


def _check_hex_color(value: str) -> str:
    if not _HEX_COLOR_RE.fullmatch(value):
        raise ValueError(f"'{value}' is not a #RRGGBB or #RRGGBBAA color")
    return value


class ConversionOptions(BaseModel):
    """Fully-populated, read-only options for one SRT -> FCPXML conversion."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    title_name: str = "Converted from SRT"
    format_version: str = "1.8"
    frame_rate: float = Field(default=24, gt=0)
    width: int = Field(default=1920, gt=0)
    height: int = Field(default=1080, gt=0)
    font_family: str = "Helvetica"
    font_size: float = Field(default=72, gt=0)
    font_face: str = "Regular"
    text_color: str = "#FFFFFFFF"
    background_color: str = "#00000000"
    stroke_color: str = "#000000FF"
    stroke_width: float = Field(default=0, ge=0)

    @field_validator("text_color", "background_color", "stroke_color")
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        return _check_hex_color(v)


class ConfigFile(BaseModel):
    """JSON config file (``.srt2fcpxrc.json``). Keys mirror the CLI option names."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: Optional[str] = None
    fps: Optional[float] = Field(default=None, gt=0)
    width: Optional[int] = Field(default=None, gt=0)
    height: Optional[int] = Field(default=None, gt=0)
    font: Optional[str] = None
    size: Optional[float] = Field(default=None, gt=0)
    face: Optional[str] = None
    color: Optional[str] = None
    bg: Optional[str] = None
    stroke_color: Optional[str] = Field(default=None, alias="strokeColor")
    stroke_width: Optional[float] = Field(default=None, ge=0, alias="strokeWidth")
    format_version: Optional[str] = Field(default=None, alias="formatVersion")

    @field_validator("color", "bg", "stroke_color")
    @classmethod
    def validate_hex_color(cls, v: Optional[str]) -> Optional[str]:
        return None if v is None else _check_hex_color(v)

    def to_option_values(self) -> dict[str, Any]:
        """Return only the keys set in the file, renamed to ConversionOptions fields."""
        return {
            CONFIG_KEY_TO_OPTION[key]: value
            for key, value in self.model_dump(exclude_none=True).items()
        }
