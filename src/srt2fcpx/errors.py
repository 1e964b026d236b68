from pathlib import Path
from typing import Optional


class Srt2FcpxError(Exception):
    """Base class for all srt2fcpx errors."""


class UnsafeTextError(Srt2FcpxError):
    def __init__(self, text: str, reason: str) -> None:
        preview = text[:50].replace("\n", " ")
        super().__init__(
            f"Refusing to emit subtitle text: {reason}.\n"
            f"  Text: {preview!r}\n"
            f"  Check: Does the subtitle file contain pasted markup or a crafted payload?"
        )
        self.text = text
        self.reason = reason


class InvalidAttributeNameError(Srt2FcpxError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Invalid XML attribute name: {name!r}.\n"
            f"  Check: Attribute names must start with a letter or underscore and contain "
            f"only letters, digits, '_', '.' or '-'."
        )
        self.name = name


class TemplateError(Srt2FcpxError):
    def __init__(self, detail: str, path: Optional[Path] = None) -> None:
        where = f" '{path.name}'" if path is not None else ""
        super().__init__(
            f"Cannot use FCPXML template{where}.\n"
            f"  Cause: {detail}\n"
            f"  Check: Does the template contain a {{{{TITLES}}}} placeholder?"
        )
        self.path = path
        self.detail = detail


class NoCuesError(Srt2FcpxError):
    def __init__(self, errors: Optional[list[str]] = None) -> None:
        self.errors = list(errors or [])
        detail = f"\n  Cause: {self.errors[0]}" if self.errors else ""
        super().__init__(
            "No valid SRT cues found in input"
            f"{detail}\n"
            "  Check: Is the file valid SRT (index line, 'HH:MM:SS,mmm --> HH:MM:SS,mmm', text)?"
        )


class SubtitleReadError(Srt2FcpxError):
    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(
            f"Cannot read subtitle file '{path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the file readable and plain text?\n"
            f"  Tip: Try re-saving the file as UTF-8 in a text editor."
        )
        self.path = path
        self.detail = detail


class ConfigError(Srt2FcpxError):
    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(
            f"Cannot load config file '{path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the file valid JSON with known keys (title, fps, width, height, font, "
            f"size, face, color, bg, strokeColor, strokeWidth, formatVersion)?"
        )
        self.path = path
        self.detail = detail


class InvalidOptionsError(Srt2FcpxError):
    def __init__(self, detail: str) -> None:
        super().__init__(
            f"Invalid conversion options.\n"
            f"  Cause: {detail}\n"
            f"  Check: Colors must be #RRGGBB or #RRGGBBAA; sizes and frame rate must be positive."
        )
        self.detail = detail


class OutputWriteError(Srt2FcpxError):
    def __init__(self, output_path: Path, detail: str) -> None:
        super().__init__(
            f"Failed to write FCPXML output '{output_path.name}'.\n"
            f"  Cause: {detail}\n"
            f"  Check: Is the output directory writable?"
        )
        self.output_path = output_path
        self.detail = detail
