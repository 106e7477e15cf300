from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .config import RunConfig
from .io_utils import join_path, path_name, path_stem, path_suffix


@dataclass(frozen=True, slots=True)
class ConversionJob:
    """One invocation of the external converter for a single source file."""

    input_path: Path
    unit_name: str
    output_dir: Path
    argv: tuple[str, ...]


def is_eligible(config: RunConfig, filename: str) -> bool:
    return path_suffix(filename) == config.source_extension


def output_unit_name(config: RunConfig, filename: str) -> str:
    base = path_stem(filename)
    return f"{config.prefix}{base}" if config.prefix else base


def build_argv(config: RunConfig, output_dir: Path, input_path: Path) -> tuple[str, ...]:
    # Order matters to the converter: required pairs, optional pairs, -o, input last.
    args: list[str] = ["-e", str(config.epsg), "-m", str(config.elevation_key)]
    optional = (
        ("-p", config.prefix),
        ("-el", config.elevation_endpoint),
        ("-w", config.wof_endpoint),
        ("-l", config.license),
    )
    for flag, value in optional:
        if value:
            args.extend([flag, value])
    args.extend(["-o", str(output_dir)])
    args.append(str(input_path))
    return tuple(args)


def build_job(config: RunConfig, filename: str) -> Optional[ConversionJob]:
    """Describe the job for ``filename`` or return None when it is not a source file."""
    name = path_name(filename)
    if not is_eligible(config, name):
        return None
    unit = output_unit_name(config, name)
    output_dir = join_path(config.output_dir, unit)
    input_path = join_path(config.input_dir, name)
    return ConversionJob(
        input_path=input_path,
        unit_name=unit,
        output_dir=output_dir,
        argv=build_argv(config, output_dir, input_path),
    )


__all__ = [
    "ConversionJob",
    "build_argv",
    "build_job",
    "is_eligible",
    "output_unit_name",
]
