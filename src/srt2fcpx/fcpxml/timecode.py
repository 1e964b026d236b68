"""Frame-fraction timecodes and FCPXML color vectors."""
import math
import re

_HEX_COLOR_RE = re.compile(r"#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{8})")


def format_number(value: float) -> str:
    """Render a number the way FCPXML expects: ``24.0`` -> ``24``, ``23.976`` -> ``23.976``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def ms_to_frame_fraction(ms: int, frame_rate: float) -> str:
    """Convert milliseconds to a frame-aligned rational time, e.g. ``2000, 24`` -> ``"48/24s"``.

    Partial frames are truncated, never rounded: a cue ending 1ms short of a
    frame boundary loses that last frame.
    """
    frames = math.floor(ms / 1000 * frame_rate)
    return f"{frames}/{format_number(frame_rate)}s"


def hex_to_color_vector(hex_color: str) -> str:
    """Convert ``#RRGGBB`` / ``#RRGGBBAA`` to an FCPXML ``"r g b a"`` string.

    Components are byte / 255.  Exactly 0 and 1 are written as ``0`` and
    ``1``; anything else uses the shortest round-trip decimal.  Alpha
    defaults to 1 for the six-digit form.

    Raises:
        ValueError: If *hex_color* is not 6 or 8 hex digits (``#`` optional).
    """
    match = _HEX_COLOR_RE.fullmatch(hex_color.strip())
    if match is None:
        raise ValueError(
            f"Invalid hex color '{hex_color}'. Expected #RRGGBB or #RRGGBBAA."
        )
    digits = match.group(1)
    components = [int(digits[i:i + 2], 16) / 255 for i in range(0, len(digits), 2)]
    if len(components) == 3:
        components.append(1.0)
    return " ".join(_format_component(c) for c in components)


def _format_component(value: float) -> str:
    if value == 0:
        return "0"
    if value == 1:
        return "1"
    return repr(value)
