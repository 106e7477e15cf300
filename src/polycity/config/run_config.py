from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..errors import ConfigurationError

log = logging.getLogger(__name__)

DEFAULT_CONVERTER = "polygon-city"
DEFAULT_SOURCE_EXTENSION = ".gml"
DEFAULT_FRAGMENT_NAME = "index.geojson"
DEFAULT_READ_WORKERS = 4

_REQUIRED = ("epsg", "elevation_key", "output_dir", "input_dir")

# Option names used by the command line tool, accepted as config file keys.
_ALIASES = {
    "mapzen": "elevation_key",
    "elevation": "elevation_endpoint",
    "wof": "wof_endpoint",
    "output": "output_dir",
    "input": "input_dir",
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _parse_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
    raise ConfigurationError(f"{name} must be true or false: {value!r}")


@dataclass(frozen=True)
class RunConfig:
    """Immutable settings for one batch run."""

    epsg: Optional[str] = None
    elevation_key: Optional[str] = None
    prefix: Optional[str] = None
    elevation_endpoint: Optional[str] = None
    wof_endpoint: Optional[str] = None
    license: Optional[str] = None
    output_dir: Optional[Path] = None
    input_dir: Optional[Path] = None
    converter: str = DEFAULT_CONVERTER
    source_extension: str = DEFAULT_SOURCE_EXTENSION
    fragment_name: str = DEFAULT_FRAGMENT_NAME
    read_workers: int = DEFAULT_READ_WORKERS
    stop_on_interrupt: bool = True
    strict_fragments: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RunConfig":
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for raw_key, value in data.items():
            key = str(raw_key).strip().replace("-", "_")
            key = _ALIASES.get(key, key)
            if key not in known:
                log.warning("Ignoring unknown configuration key '%s'", raw_key)
                continue
            values[key] = value
        return cls().merged(**values)

    @classmethod
    def from_file(cls, path: Path) -> "RunConfig":
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
        data = cls._load_data_from_text(text, suffix=path.suffix)
        return cls.from_mapping(data)

    def merged(self, **overrides: Any) -> "RunConfig":
        """Return a copy with every non-None override applied and normalised."""
        updates: Dict[str, Any] = {}
        for key, value in overrides.items():
            if value is None:
                continue
            if key in ("output_dir", "input_dir"):
                updates[key] = Path(str(value)).expanduser()
            elif key == "read_workers":
                try:
                    updates[key] = int(value)
                except (TypeError, ValueError) as exc:
                    raise ConfigurationError(f"read_workers must be an integer: {value!r}") from exc
            elif key in ("stop_on_interrupt", "strict_fragments"):
                updates[key] = _parse_bool(key, value)
            elif key in ("converter", "source_extension", "fragment_name"):
                cleaned = _clean(value)
                if cleaned:
                    updates[key] = cleaned
            else:
                updates[key] = _clean(value)
        return replace(self, **updates)

    def missing_fields(self) -> list[str]:
        missing = []
        for name in _REQUIRED:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing

    def validate(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise ConfigurationError(
                "Missing required configuration: " + ", ".join(missing)
            )
        if self.read_workers < 1:
            raise ConfigurationError("read_workers must be at least 1")
        if not self.source_extension.startswith("."):
            raise ConfigurationError(
                f"source_extension must start with '.': {self.source_extension!r}"
            )

    def describe(self) -> Dict[str, Any]:
        """Loggable view of the configuration with the credential masked."""
        key = self.elevation_key or ""
        masked = key[:2] + "*" * max(len(key) - 2, 0) if key else None
        return {
            "epsg": self.epsg,
            "elevation_key": masked,
            "prefix": self.prefix,
            "elevation_endpoint": self.elevation_endpoint,
            "wof_endpoint": self.wof_endpoint,
            "license": self.license,
            "output_dir": str(self.output_dir) if self.output_dir else None,
            "input_dir": str(self.input_dir) if self.input_dir else None,
            "converter": self.converter,
        }

    @staticmethod
    def _load_data_from_text(text: str, *, suffix: str) -> Dict[str, Any]:
        ext = (suffix or "").lower()
        if ext in {".yaml", ".yml"}:
            try:
                loaded = yaml.safe_load(text)
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML config: {exc}") from exc
            if not isinstance(loaded, dict):
                raise ConfigurationError("YAML config must define a mapping at the top level")
            return loaded
        if ext == ".json":
            try:
                loaded = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ConfigurationError(f"Invalid JSON config: {exc}") from exc
            if not isinstance(loaded, dict):
                raise ConfigurationError("JSON config must define a mapping at the top level")
            return loaded
        raise ConfigurationError(f"Unsupported config type: {suffix}")


__all__ = [
    "DEFAULT_CONVERTER",
    "DEFAULT_FRAGMENT_NAME",
    "DEFAULT_READ_WORKERS",
    "DEFAULT_SOURCE_EXTENSION",
    "RunConfig",
]
