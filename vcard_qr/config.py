"""Configuration helpers for the vCard/QR pipeline."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

LOGGER = logging.getLogger(__name__)

TRACE = 5

DEFAULT_FOLDER = "testdata"
DEFAULT_NOTE_TEMPLATE = "建中42屆{class_label}班同學"
DEFAULT_QR_SIZE = 256
DEFAULT_IMAGE_SIZE = 180

_DELIMITER_NAMES = {"tab": "\t", "comma": ","}


class ConfigurationError(RuntimeError):
    """Raised when configuration files are missing or malformed."""


_SUPPORTED_EXTENSIONS = {".json", ".yaml", ".yml"}


def load_configuration(path: str | Path) -> Dict[str, Any]:
    """Load configuration data from a JSON or YAML file."""

    file_path = Path(path)
    if not file_path.exists():
        raise ConfigurationError(f"Configuration file '{file_path}' was not found")

    if file_path.suffix.lower() not in _SUPPORTED_EXTENSIONS:
        raise ConfigurationError(
            f"Unsupported configuration format '{file_path.suffix}'. Supported extensions: {sorted(_SUPPORTED_EXTENSIONS)}"
        )

    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Configuration file '{file_path}' is not valid JSON: {exc}") from exc
    else:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - dependency optional
            raise ConfigurationError(
                "YAML configuration requires the 'pyyaml' package to be installed"
            ) from exc
        data = yaml.safe_load(text)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file '{file_path}' must contain a mapping")
    return data


def parse_delimiter(value: Optional[str]) -> Optional[str]:
    """Accept ``tab``/``comma`` names as well as the literal characters."""

    if value is None:
        return None
    if value in _DELIMITER_NAMES.values():
        return value
    try:
        return _DELIMITER_NAMES[value.lower()]
    except KeyError as exc:
        raise ConfigurationError(
            f"Unsupported delimiter '{value}'. Use one of {sorted(_DELIMITER_NAMES)}"
        ) from exc


@dataclass(slots=True)
class PipelineSettings:
    """Runtime options for a single pipeline run."""

    folder: Path = Path(DEFAULT_FOLDER)
    delimiter: Optional[str] = None
    encoding: str = "auto"
    note_template: str = DEFAULT_NOTE_TEMPLATE
    qr_size: int = DEFAULT_QR_SIZE
    image_size: int = DEFAULT_IMAGE_SIZE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PipelineSettings":
        known = {item.name for item in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")
        return cls().merged(**data)

    def merged(self, **overrides: Any) -> "PipelineSettings":
        """Return a copy with every non-``None`` override applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        if "folder" in values:
            values["folder"] = Path(values["folder"])
        if "delimiter" in values:
            values["delimiter"] = parse_delimiter(str(values["delimiter"]))
        for key in ("qr_size", "image_size"):
            if key in values:
                try:
                    values[key] = int(values[key])
                except (TypeError, ValueError) as exc:
                    raise ConfigurationError(f"'{key}' must be an integer") from exc
                if values[key] <= 0:
                    raise ConfigurationError(f"'{key}' must be positive")
        if "note_template" in values:
            try:
                values["note_template"].format(class_label="")
            except (KeyError, IndexError, ValueError) as exc:
                raise ConfigurationError(f"Invalid note template {values['note_template']!r}: {exc}") from exc
            if "{class_label}" not in values["note_template"]:
                LOGGER.warning("Note template %r does not reference {class_label}", values["note_template"])
        return replace(self, **values)


__all__ = [
    "ConfigurationError",
    "PipelineSettings",
    "load_configuration",
    "parse_delimiter",
    "DEFAULT_NOTE_TEMPLATE",
]
