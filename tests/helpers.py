"""Test helpers shared across modules (fixtures live in conftest.py)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from polycity.gateway import JobOutcome, JobStatus
from polycity.jobs import ConversionJob


def read_invocations(log_path: Path) -> list[list[str]]:
    if not log_path.exists():
        return []
    return [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]


def write_inputs(directory: Path, files: dict[str, str]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, content in files.items():
        (directory / name).write_text(content, encoding="utf-8")
    return directory


def write_fragment(unit_dir: Path, points: Iterable[Iterable[float]]) -> Path:
    unit_dir.mkdir(parents=True, exist_ok=True)
    fragment = unit_dir / "index.geojson"
    fragment.write_text(
        json.dumps(
            {
                "type": "Feature",
                "properties": {},
                "geometry": {"type": "MultiPoint", "coordinates": [list(p) for p in points]},
            }
        ),
        encoding="utf-8",
    )
    return fragment


def _outcome(job: ConversionJob, status: JobStatus, **extra) -> JobOutcome:
    return JobOutcome(
        unit_name=job.unit_name,
        input_path=job.input_path,
        output_dir=job.output_dir,
        status=status,
        **extra,
    )


@dataclass
class StubGateway:
    """In-process gateway double; fails or interrupts the named units."""

    fail: set[str] = field(default_factory=set)
    interrupt: set[str] = field(default_factory=set)
    calls: list[ConversionJob] = field(default_factory=list)

    def run(self, job: ConversionJob) -> JobOutcome:
        self.calls.append(job)
        if job.unit_name in self.interrupt:
            return _outcome(
                job, JobStatus.FAILED, returncode=-2, diagnostics="interrupted", interrupted=True
            )
        if job.unit_name in self.fail:
            return _outcome(job, JobStatus.FAILED, returncode=1, diagnostics="exit code 1")
        write_fragment(job.output_dir, [(0.0, 0.0), (1.0, 1.0)])
        return _outcome(job, JobStatus.SUCCEEDED, returncode=0)

    def trigger_resume(self) -> bool:
        return True
