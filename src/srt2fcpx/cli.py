"""srt2fcpx CLI entry point.

Reads an SRT file, merges options (command line > config file > defaults),
converts the cues to FCPXML and writes the result.  Every typed conversion
error is shown as a Rich panel on stderr; tracebacks are never shown.
"""

from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from charset_normalizer import from_path
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from srt2fcpx import require_cues
from srt2fcpx.config.loader import discover_config, load_config_file, merge_options
from srt2fcpx.config.schema import ConfigFile, ConversionOptions
from srt2fcpx.errors import ConfigError, OutputWriteError, Srt2FcpxError, SubtitleReadError, TemplateError
from srt2fcpx.fcpxml.builder import build_document, build_document_from_template
from srt2fcpx.ingestion.srt import format_srt_timecode, parse_srt

app = typer.Typer(
    name="srt2fcpx",
    help="Convert SRT subtitles to Final Cut Pro XML (FCPXML) titles.",
    add_completion=False,
)

_VALID_SUBTITLE_EXTS = {".srt"}

# ConversionOptions field -> label shown in the "applied options" summary
_OPTION_LABELS: dict[str, str] = {
    "title_name": "title",
    "frame_rate": "fps",
    "width": "width",
    "height": "height",
    "font_family": "font",
    "font_size": "size",
    "font_face": "face",
    "text_color": "color",
    "background_color": "bg",
    "format_version": "format",
}


def read_subtitle_file(path: Path) -> str:
    """Read *path* as UTF-8 (BOM tolerated), falling back to charset-normalizer."""
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        pass
    except OSError as exc:
        raise SubtitleReadError(path, str(exc)) from exc

    best = from_path(path).best()
    if best is None:
        raise SubtitleReadError(path, "Could not determine file encoding. Re-save as UTF-8.")
    return str(best)


def read_template_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateError(str(exc), path) from exc


def write_output_file(content: str, output_path: Path) -> None:
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise OutputWriteError(output_path, str(exc)) from exc


def describe_applied_options(options: ConversionOptions) -> list[str]:
    """List options that differ from the defaults, for the summary output."""
    defaults = ConversionOptions()
    applied = [
        f"{label}: {getattr(options, field)}"
        for field, label in _OPTION_LABELS.items()
        if getattr(options, field) != getattr(defaults, field)
    ]
    if options.stroke_width != defaults.stroke_width:
        applied.append(f"stroke: {options.stroke_color} (width: {options.stroke_width})")
    return applied


def _input_error(err_console: Console, message: str) -> None:
    err_console.print(Panel(
        message,
        title="[red]Input Error[/red]",
        border_style="red",
    ))


@app.command()
def main(
    input_file: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            file_okay=True,
            dir_okay=False,
            help="Input SRT file.",
        ),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", dir_okay=False, help="Output FCPXML file (default: <input>.fcpxml)."),
    ] = None,
    title: Annotated[
        Optional[str], typer.Option("--title", "-t", help="Project title (default: 'Converted from SRT').")
    ] = None,
    fps: Annotated[Optional[float], typer.Option("--fps", "-f", help="Frame rate (default: 24).")] = None,
    width: Annotated[Optional[int], typer.Option("--width", help="Video width (default: 1920).")] = None,
    height: Annotated[Optional[int], typer.Option("--height", help="Video height (default: 1080).")] = None,
    font: Annotated[Optional[str], typer.Option("--font", help="Font family (default: Helvetica).")] = None,
    size: Annotated[Optional[float], typer.Option("--size", help="Font size (default: 72).")] = None,
    face: Annotated[
        Optional[str], typer.Option("--face", help="Font face/weight, e.g. Regular, Bold, W8 (default: Regular).")
    ] = None,
    color: Annotated[
        Optional[str], typer.Option("--color", help="Text color #RRGGBBAA (default: #FFFFFFFF).")
    ] = None,
    bg: Annotated[
        Optional[str], typer.Option("--bg", help="Background color #RRGGBBAA (default: #00000000).")
    ] = None,
    stroke_color: Annotated[
        Optional[str], typer.Option("--stroke-color", help="Stroke/outline color #RRGGBBAA (default: #000000FF).")
    ] = None,
    stroke_width: Annotated[
        Optional[float], typer.Option("--stroke-width", help="Stroke/outline width; 0 disables (default: 0).")
    ] = None,
    format_version: Annotated[
        Optional[str], typer.Option("--format-version", help="FCPXML format version (default: 1.8).")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", dir_okay=False, help="Config file (overrides auto-discovery)."),
    ] = None,
    template: Annotated[
        Optional[Path],
        typer.Option("--template", dir_okay=False, help="FCPXML template with {{PLACEHOLDER}} fields."),
    ] = None,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Suppress all output except errors.")
    ] = False,
) -> None:
    """Convert an SRT subtitle file to an FCPXML title timeline."""
    console = Console(quiet=quiet)
    err_console = Console(stderr=True)

    # --- Input validation: extension before existence ---
    if input_file.suffix.lower() not in _VALID_SUBTITLE_EXTS:
        _input_error(
            err_console,
            f"Unsupported subtitle format: [bold]{escape(input_file.suffix or input_file.name)}[/bold]\n"
            f"Supported formats: {', '.join(sorted(_VALID_SUBTITLE_EXTS))}",
        )
        raise typer.Exit(1)

    if not input_file.exists():
        _input_error(
            err_console,
            f"File not found: [bold]{escape(str(input_file))}[/bold]\n"
            f"Check that the path is correct and the file is accessible.",
        )
        raise typer.Exit(1)

    console.print(f"Reading: [dim]{escape(str(input_file))}[/dim]")

    # --- Config discovery: problems are warnings, conversion continues ---
    config_file: Optional[ConfigFile] = None
    try:
        config_path = discover_config(config)
        if config_path is not None:
            config_file = load_config_file(config_path)
            console.print(f"Config loaded from: [dim]{escape(str(config_path))}[/dim]")
    except ConfigError as e:
        console.print(f"[yellow]Warning:[/] {escape(str(e))}")

    cli_values: dict[str, Any] = {
        "title_name": title,
        "frame_rate": fps,
        "width": width,
        "height": height,
        "font_family": font,
        "font_size": size,
        "font_face": face,
        "text_color": color,
        "background_color": bg,
        "stroke_color": stroke_color,
        "stroke_width": stroke_width,
        "format_version": format_version,
    }

    try:
        options = merge_options(cli_values, config_file)
        source = read_subtitle_file(input_file)

        result = parse_srt(source)
        for diagnostic in result.errors:
            console.print(f"[yellow]Warning:[/] {escape(diagnostic)}")
        cues = require_cues(result)

        if template is not None:
            fcpxml = build_document_from_template(cues, read_template_file(template), options)
        else:
            fcpxml = build_document(cues, options)

        output_path = output if output is not None else Path(f"{input_file.stem}.fcpxml")
        write_output_file(fcpxml, output_path)
    except Srt2FcpxError as e:
        err_console.print(Panel(
            escape(str(e)),
            title="[red]Conversion Error[/red]",
            border_style="red",
        ))
        raise typer.Exit(1)

    timeline_end = format_srt_timecode(max(c.end_ms for c in cues))
    console.print(Panel(
        f"[bold green]Converted successfully[/bold green]\n\n"
        f"  Output:     [dim]{escape(str(output_path))}[/dim]\n"
        f"  Cues:       {len(cues)}\n"
        f"  Warnings:   {len(result.errors)}\n"
        f"  Ends at:    {timeline_end}",
        title="[green]FCPXML Ready[/green]",
        border_style="green",
    ))

    applied = describe_applied_options(options)
    if applied:
        console.print(f"[dim]Applied options: {escape(', '.join(applied))}[/dim]")
