from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Deque

from .config import RunConfig
from .errors import InputDirectoryError, OutputDirectoryError
from .gateway import ConverterGateway, JobOutcome
from .io_utils import ensure_directory, list_directory, list_subdirectories
from .jobs import ConversionJob, build_job

LOG = logging.getLogger(__name__)


def _is_cancelled(cancel_event: Any | None) -> bool:
    if cancel_event is None:
        return False
    is_set = getattr(cancel_event, "is_set", None)
    if callable(is_set):
        return bool(is_set())
    return bool(cancel_event)


@dataclass(slots=True)
class BatchReport:
    """What the batch ran and which output units exist afterwards."""

    outcomes: list[JobOutcome] = field(default_factory=list)
    unit_dirs: list[Path] = field(default_factory=list)
    not_started: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> list[JobOutcome]:
        return [outcome for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed(self) -> list[JobOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]


def discover_jobs(config: RunConfig) -> list[ConversionJob]:
    """Jobs for every eligible file directly inside the input directory, in name order."""
    try:
        entries = list_directory(config.input_dir)
    except OSError as exc:
        raise InputDirectoryError(f"Cannot list input directory {config.input_dir}: {exc}") from exc
    jobs: list[ConversionJob] = []
    for entry in entries:
        if not entry.is_file():
            continue
        job = build_job(config, entry.name)
        if job is None:
            LOG.debug("Skipping non-source file %s", entry.name)
            continue
        jobs.append(job)
    return jobs


class BatchRunner:
    """Feeds conversion jobs to the gateway through a single-worker FIFO queue."""

    def __init__(self, gateway: ConverterGateway) -> None:
        self.gateway = gateway

    def run(self, config: RunConfig, *, cancel_event: Any | None = None) -> BatchReport:
        config.validate()
        jobs = discover_jobs(config)
        try:
            ensure_directory(config.output_dir)
        except OSError as exc:
            raise OutputDirectoryError(
                f"Cannot create output directory {config.output_dir}: {exc}"
            ) from exc
        LOG.info("Discovered %d source file(s) under %s", len(jobs), config.input_dir)

        report = BatchReport()
        queue: Deque[ConversionJob] = deque(jobs)
        total = len(jobs)
        while queue:
            if _is_cancelled(cancel_event):
                LOG.warning("Batch cancelled; %d job(s) not started.", len(queue))
                break
            job = queue.popleft()
            LOG.info("[%d/%d] Converting %s", total - len(queue), total, job.input_path.name)
            # run() blocks until the converter exits, so outputs are complete here.
            outcome = self.gateway.run(job)
            report.outcomes.append(outcome)
            if outcome.interrupted and config.stop_on_interrupt:
                LOG.warning("Stopping batch after interrupted job %s", job.unit_name)
                break
        report.not_started = [job.unit_name for job in queue]

        try:
            report.unit_dirs = list_subdirectories(config.output_dir)
        except OSError as exc:
            raise OutputDirectoryError(
                f"Cannot list output directory {config.output_dir}: {exc}"
            ) from exc
        return report


__all__ = ["BatchReport", "BatchRunner", "discover_jobs"]
