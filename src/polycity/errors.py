from __future__ import annotations


class PolycityError(Exception):
    """Base class for errors raised by the batch orchestrator."""


class PreconditionError(PolycityError):
    """Raised before any conversion job starts; the run cannot proceed."""


class ConfigurationError(PreconditionError):
    """Required run configuration is missing or the config file is invalid."""


class ConverterNotFoundError(PreconditionError):
    """The external converter executable cannot be resolved."""


class InputDirectoryError(PreconditionError):
    """The input directory does not exist or cannot be listed."""


class OutputDirectoryError(PreconditionError):
    """The output directory cannot be created or listed."""


class FragmentReadError(PolycityError):
    """A per-unit GeoJSON fragment could not be read or has no coordinates."""

    def __init__(self, path, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class CatalogWriteError(PolycityError):
    """The combined catalog document could not be written."""


__all__ = [
    "PolycityError",
    "PreconditionError",
    "ConfigurationError",
    "ConverterNotFoundError",
    "InputDirectoryError",
    "OutputDirectoryError",
    "FragmentReadError",
    "CatalogWriteError",
]
