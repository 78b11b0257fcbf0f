"""Build settings, optionally loaded from a JSON config file.

Config file format:
    {
        "output": "hierarchy.gv",
        "format": "dot",
        "name": "my-app",
        "ancestors": "direct",
        "workers": 8,
        "exclude": [".venv", "build"],
        "verbose": false
    }

Every field is optional; command-line options take precedence.
"""

from pathlib import Path
from typing import Any, Optional

import msgspec

from .errors import ConfigError
from .output import FORMATS
from .provider import ANCESTOR_MODES


class BuildSettings(msgspec.Struct, omit_defaults=True, forbid_unknown_fields=True):
    """Settings for one graph build."""

    output: str = "output.gv"
    format: str = "dot"
    name: Optional[str] = None
    ancestors: str = "direct"
    workers: Optional[int] = None
    exclude: list[str] = []
    verbose: bool = False


_decoder = msgspec.json.Decoder(BuildSettings)


def validate_settings(settings: BuildSettings) -> BuildSettings:
    """Check enumerated and numeric fields, raising ConfigError if invalid."""
    if settings.format not in FORMATS:
        raise ConfigError(
            f"Unknown output format: {settings.format} (expected one of {', '.join(FORMATS)})"
        )
    if settings.ancestors not in ANCESTOR_MODES:
        raise ConfigError(
            f"Unknown ancestor mode: {settings.ancestors} "
            f"(expected one of {', '.join(ANCESTOR_MODES)})"
        )
    if settings.workers is not None and settings.workers < 1:
        raise ConfigError(f"Worker count must be positive, got {settings.workers}")
    return settings


def load_settings(path: Optional[str | Path] = None) -> BuildSettings:
    """Load settings from a JSON config file, or defaults when ``path`` is None.

    Raises:
        ConfigError: If the file cannot be read or does not match the schema.
    """
    if path is None:
        return BuildSettings()

    try:
        with open(path, "rb") as f:
            settings = _decoder.decode(f.read())
    except OSError as e:
        raise ConfigError(f"Unable to read config file {path}: {e.strerror or e}") from e
    except msgspec.DecodeError as e:
        raise ConfigError(f"Invalid config file {path}: {e}") from e

    return validate_settings(settings)


def apply_overrides(settings: BuildSettings, **overrides: Any) -> BuildSettings:
    """Return a copy of ``settings`` with every non-None override applied."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return validate_settings(msgspec.structs.replace(settings, **values))
