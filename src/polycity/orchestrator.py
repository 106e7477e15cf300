from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional, Sequence

from .batch import BatchReport, BatchRunner
from .catalog import AggregationReport, aggregate, build_catalog, write_catalog
from .cli import RESUME_COMMAND, parse_args
from .config import DEFAULT_CONVERTER, RunConfig
from .errors import CatalogWriteError, FragmentReadError, PreconditionError
from .gateway import ConverterGateway
from .scanner import find_fragments

LOG = logging.getLogger(__name__)


@dataclass(slots=True)
class RunResult:
    batch: BatchReport
    aggregation: AggregationReport
    catalog_path: Path


def run(
    config: RunConfig,
    *,
    gateway: Optional[ConverterGateway] = None,
    cancel_event: Any | None = None,
) -> RunResult:
    """Convert every source file, then index the output tree.

    Precondition failures raise before any converter process starts. Failed
    conversions are reported in the result and never stop the run.
    """
    config.validate()
    if gateway is None:
        gateway = ConverterGateway.resolve(config.converter)
    config = replace(
        config,
        input_dir=Path(config.input_dir).resolve(),
        output_dir=Path(config.output_dir).resolve(),
    )
    LOG.info("Run configuration: %s", config.describe())

    batch = BatchRunner(gateway).run(config, cancel_event=cancel_event)
    fragments = find_fragments(config.output_dir, batch.unit_dirs, config.fragment_name)
    aggregation = aggregate(
        config.output_dir,
        fragments,
        workers=config.read_workers,
        strict=config.strict_fragments,
    )
    catalog_path = write_catalog(config.output_dir, build_catalog(aggregation.records))
    return RunResult(batch=batch, aggregation=aggregation, catalog_path=catalog_path)


def resume(
    converter: str = DEFAULT_CONVERTER, *, gateway: Optional[ConverterGateway] = None
) -> bool:
    if gateway is None:
        gateway = ConverterGateway.resolve(converter)
    return gateway.trigger_resume()


def build_config(args: argparse.Namespace) -> RunConfig:
    """RunConfig from an optional config file with command line values on top."""
    base = RunConfig()
    if getattr(args, "config_path", None):
        base = RunConfig.from_file(Path(args.config_path).expanduser())
    return base.merged(
        epsg=args.epsg,
        elevation_key=args.elevation_key,
        prefix=args.prefix,
        elevation_endpoint=args.elevation_endpoint,
        wof_endpoint=args.wof_endpoint,
        license=args.license,
        output_dir=args.output_dir,
        input_dir=args.input_dir,
        converter=args.converter,
        read_workers=args.read_workers,
        stop_on_interrupt=False if args.continue_on_interrupt else None,
        strict_fragments=True if args.strict_fragments else None,
    )


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    if args.command == RESUME_COMMAND:
        try:
            ok = resume(args.converter or DEFAULT_CONVERTER)
        except PreconditionError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 2
        print("Resume finished." if ok else "Resume failed.")
        return 0 if ok else 1

    try:
        config = build_config(args)
        result = run(config)
    except PreconditionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except (FragmentReadError, CatalogWriteError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    _print_summary(result)
    return 0


# ------------- summary -------------
def _print_summary(result: RunResult) -> None:
    batch = result.batch
    if not batch.outcomes:
        print("No source files were converted.")
    else:
        print("\nSummary:")
        for outcome in batch.outcomes:
            if outcome.succeeded:
                print(f"- {outcome.input_path.name}: ok -> {outcome.output_dir}")
            else:
                print(f"- {outcome.input_path.name}: FAILED ({outcome.diagnostics})")
        print(f"{len(batch.succeeded)} succeeded, {len(batch.failed)} failed.")
    if batch.not_started:
        print(f"Not started: {', '.join(batch.not_started)}")
    for failure in result.aggregation.failures:
        print(f"Skipped fragment {failure.path}: {failure.reason}")
    print(
        f"Catalog with {len(result.aggregation.records)} envelope(s) written to "
        f"{result.catalog_path}"
    )


__all__ = ["RunResult", "build_config", "main", "resume", "run"]
