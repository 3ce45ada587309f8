"""Track parameters: defaults, validation and JSON presets.

Configuration is a flat ``dict`` keyed by parameter name.  Every parameter
is declared once in :data:`TRACK_PARAMS`; defaults, validation and preset
files are all derived from that list.
"""

from __future__ import annotations

import json
import math
import os
import re
from dataclasses import dataclass
from typing import Any

PRESET_SCHEMA_VERSION = "1.0"

# CLI-only keys never written to presets
_INTERNAL_KEYS = {"png", "height", "preset", "_source_path"}

_PRESET_META_KEYS = ("schema_version", "_description")

_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


class ConfigError(Exception):
    """Raised when track parameters are invalid or a preset is unreadable."""
    pass


@dataclass
class ConfigFieldError:
    """One invalid parameter: its key, the rejected value and why."""
    key: str
    value: Any
    message: str


@dataclass(frozen=True)
class ParamSpec:
    """Declaration of one track parameter.

    Numeric parameters may carry a lower bound; string parameters may be
    flagged as colours, which must be ``#RRGGBB`` or ``#AARRGGBB``.
    """
    key: str
    type: type | tuple              # accepted Python type(s)
    default: Any
    label: str                       # shown in error messages
    description: str = ""
    min: float | None = None
    min_exclusive: bool = False
    color: bool = False


TRACK_PARAMS: list[ParamSpec] = [
    ParamSpec(
        key="rms_frames_per_second", type=(int, float), default=50.0,
        min=0.0, min_exclusive=True,
        label="RMS frames per second",
        description=(
            "Sampling rate of the RMS values. Used for every time to "
            "sample-index conversion, so it must match the rate the "
            "segments' RMS values were produced at."
        ),
    ),
    ParamSpec(
        key="pixels_per_rms", type=(int, float), default=1.0,
        min=0.0, min_exclusive=True,
        label="Pixels per RMS sample",
        description="Horizontal zoom: width in pixels of one RMS sample.",
    ),
    ParamSpec(
        key="track_background_color", type=str, default="#1a808080",
        color=True,
        label="Track background colour",
        description="Fill behind all segments (#RRGGBB or #AARRGGBB).",
    ),
    ParamSpec(
        key="fill_color", type=str, default="#ff000000",
        color=True,
        label="Waveform fill colour",
        description="Default fill for segment waveform shapes.",
    ),
]


def default_config() -> dict[str, Any]:
    """Fresh dict with every parameter at its default."""
    return {p.key: p.default for p in TRACK_PARAMS}


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge *configs* left to right; later values win.

    A ``None`` never replaces a value that is already set, so options the
    user left unset do not mask a preset or document value.
    """
    merged: dict[str, Any] = {}
    for cfg in configs:
        merged.update({
            k: v for k, v in cfg.items() if v is not None or k not in merged
        })
    return merged


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------

def load_preset(path: str) -> dict[str, Any]:
    """Read a JSON preset and return its parameters (a partial config).

    Raises :class:`ConfigError` when the file is missing, is not valid JSON
    or does not hold an object.  Values are validated later, once merged.
    """
    if not os.path.isfile(path):
        raise ConfigError(f"Preset file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in preset file {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read preset file {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(
            f"Preset {path} must hold a JSON object, got {type(data).__name__}"
        )
    return {k: v for k, v in data.items() if k not in _PRESET_META_KEYS}


def save_preset(config: dict[str, Any], path: str, *,
                description: str | None = None) -> None:
    """Write the non-default track parameters of *config* to *path*."""
    defaults = default_config()
    preset: dict[str, Any] = {"schema_version": PRESET_SCHEMA_VERSION}
    if description:
        preset["_description"] = description
    preset.update({
        k: v for k, v in config.items()
        if k not in _INTERNAL_KEYS
        and not k.startswith("_")
        and not (k in defaults and defaults[k] == v)
    })
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(preset, f, indent=4, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def _check_value(spec: ParamSpec, value: Any) -> str | None:
    """Error message for *value* under *spec*, or ``None`` when it is valid."""
    if value is None:
        return f"{spec.label} must not be empty."
    # bool is an int subclass but never a valid parameter value
    if isinstance(value, bool) or not isinstance(value, spec.type):
        got = "boolean" if isinstance(value, bool) else type(value).__name__
        return f"{spec.label} must be {_type_label(spec.type)}, got {got}."
    if spec.color:
        if not _COLOR_RE.match(value):
            return f"{spec.label} must be a hex colour (#RRGGBB or #AARRGGBB)."
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return f"{spec.label} must be a finite number."
        if spec.min is not None:
            if spec.min_exclusive and value <= spec.min:
                return f"{spec.label} must be greater than {spec.min:g}."
            if not spec.min_exclusive and value < spec.min:
                return f"{spec.label} must be at least {spec.min:g}."
    return None


def validate_param_values(
    params: list[ParamSpec],
    values: dict[str, Any],
) -> list[ConfigFieldError]:
    """Check the keys of *values* that *params* declare.

    Missing keys are not errors; they take their default.  Unknown keys are
    ignored.
    """
    errors: list[ConfigFieldError] = []
    for spec in params:
        if spec.key not in values:
            continue
        message = _check_value(spec, values[spec.key])
        if message is not None:
            errors.append(ConfigFieldError(spec.key, values[spec.key], message))
    return errors


def validate_config_fields(config: dict[str, Any]) -> list[ConfigFieldError]:
    """Structured errors for *config* against :data:`TRACK_PARAMS`.  Never raises."""
    return validate_param_values(TRACK_PARAMS, config)


def validate_config(config: dict[str, Any]) -> None:
    """Raise :class:`ConfigError` naming every invalid parameter in *config*."""
    errors = validate_config_fields(config)
    if errors:
        raise ConfigError(
            "Invalid track parameters:\n  • "
            + "\n  • ".join(e.message for e in errors)
        )


def _type_label(t) -> str:
    if isinstance(t, tuple):
        return " or ".join(x.__name__ for x in t)
    return t.__name__
