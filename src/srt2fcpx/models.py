from dataclasses import dataclass, field


@dataclass(frozen=True)
class Cue:
    """A single timed subtitle cue parsed from one SRT block."""

    index: int          # Source-declared, not necessarily contiguous
    start_ms: int
    end_ms: int         # Always > start_ms
    text: str           # Sanitized plain text, may contain "\n"

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


@dataclass
class ParseResult:
    """Cues in source order plus recoverable diagnostics."""

    cues: list[Cue] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
