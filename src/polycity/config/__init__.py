from .run_config import (
    DEFAULT_CONVERTER,
    DEFAULT_FRAGMENT_NAME,
    DEFAULT_READ_WORKERS,
    DEFAULT_SOURCE_EXTENSION,
    RunConfig,
)

__all__ = [
    "DEFAULT_CONVERTER",
    "DEFAULT_FRAGMENT_NAME",
    "DEFAULT_READ_WORKERS",
    "DEFAULT_SOURCE_EXTENSION",
    "RunConfig",
]
