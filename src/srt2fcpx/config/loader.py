from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from srt2fcpx.config.schema import ConfigFile, ConversionOptions
from srt2fcpx.errors import ConfigError, InvalidOptionsError

# Searched in order; first existing file wins.
CONFIG_FILENAMES = (".srt2fcpxrc.json", "srt2fcpx.config.json")
HOME_CONFIG_FILENAME = ".srt2fcpxrc.json"


def _format_errors(e: ValidationError) -> str:
    return "; ".join(
        f"{' -> '.join(str(x) for x in err['loc'])}: {err['msg']}"
        for err in e.errors()
    )


def load_config_file(path: Path) -> ConfigFile:
    """Load and validate a JSON config file. Raises ConfigError on failure."""
    try:
        return ConfigFile.model_validate_json(path.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise ConfigError(path, f"Schema validation failed: {_format_errors(e)}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(path, str(e)) from e


def discover_config(
    explicit: Optional[Path] = None,
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
) -> Optional[Path]:
    """Return the config file to use, or None when there is none.

    An *explicit* path must exist (ConfigError otherwise).  Without one,
    ``./.srt2fcpxrc.json``, ``./srt2fcpx.config.json`` and
    ``~/.srt2fcpxrc.json`` are tried in that order.
    """
    if explicit is not None:
        if not explicit.is_file():
            raise ConfigError(explicit, "Config file not found.")
        return explicit

    cwd = cwd if cwd is not None else Path.cwd()
    home = home if home is not None else Path.home()
    candidates = [cwd / name for name in CONFIG_FILENAMES] + [home / HOME_CONFIG_FILENAME]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def merge_options(
    cli_values: Mapping[str, Any],
    config: Optional[ConfigFile] = None,
) -> ConversionOptions:
    """Merge options with priority CLI > config file > defaults.

    *cli_values* is keyed by ConversionOptions field name; ``None`` means the
    option was not given on the command line.
    """
    values: dict[str, Any] = {}
    if config is not None:
        values.update(config.to_option_values())
    values.update({k: v for k, v in cli_values.items() if v is not None})
    try:
        return ConversionOptions.model_validate(values)
    except ValidationError as e:
        raise InvalidOptionsError(_format_errors(e)) from e
