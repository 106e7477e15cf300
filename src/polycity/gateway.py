from __future__ import annotations

import logging
import shutil
import signal
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Sequence

from .errors import ConverterNotFoundError
from .jobs import ConversionJob

LOG = logging.getLogger(__name__)

_DIAGNOSTIC_TAIL_LINES = 20


class JobStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class JobOutcome:
    """Result of one converter invocation."""

    unit_name: str
    input_path: Path
    output_dir: Path
    status: JobStatus
    returncode: Optional[int] = None
    diagnostics: Optional[str] = None
    interrupted: bool = False

    @property
    def succeeded(self) -> bool:
        return self.status is JobStatus.SUCCEEDED


@dataclass(slots=True)
class _ProcessResult:
    returncode: Optional[int]
    stdout: str
    stderr: str
    interrupted: bool = False
    start_error: Optional[str] = None


def _tail(text: str, lines: int = _DIAGNOSTIC_TAIL_LINES) -> str:
    return "\n".join(text.strip().splitlines()[-lines:])


def _signal_name(returncode: int) -> str:
    try:
        return signal.Signals(-returncode).name
    except ValueError:
        return f"signal {-returncode}"


def _describe_failure(result: _ProcessResult) -> str:
    if result.start_error:
        return f"failed to start: {result.start_error}"
    parts: list[str] = []
    code = result.returncode
    if result.interrupted:
        parts.append("interrupted")
    if code is not None and code < 0:
        parts.append(f"terminated by {_signal_name(code)}")
    elif code:
        parts.append(f"exit code {code}")
    output = _tail(result.stderr) or _tail(result.stdout)
    if output:
        parts.append(output)
    return "; ".join(parts) or "unknown failure"


class ConverterGateway:
    """Runs the external converter synchronously, one process at a time."""

    def __init__(self, executable: str) -> None:
        self.executable = executable

    @classmethod
    def resolve(cls, converter: str) -> "ConverterGateway":
        found = shutil.which(converter)
        if found is None:
            raise ConverterNotFoundError(f"Converter executable not found: {converter}")
        return cls(found)

    def run(self, job: ConversionJob) -> JobOutcome:
        LOG.info("Spawning converter for %s -> %s", job.input_path, job.output_dir)
        LOG.debug("Converter arguments: %s", list(job.argv))
        result = self._execute([self.executable, *job.argv])
        if result.stdout:
            LOG.debug("Converter output for %s:\n%s", job.unit_name, result.stdout.rstrip())
        if result.returncode == 0 and not result.interrupted and result.start_error is None:
            return JobOutcome(
                unit_name=job.unit_name,
                input_path=job.input_path,
                output_dir=job.output_dir,
                status=JobStatus.SUCCEEDED,
                returncode=0,
            )
        diagnostics = _describe_failure(result)
        LOG.error("Conversion failed for %s: %s", job.input_path.name, diagnostics)
        return JobOutcome(
            unit_name=job.unit_name,
            input_path=job.input_path,
            output_dir=job.output_dir,
            status=JobStatus.FAILED,
            returncode=result.returncode,
            diagnostics=diagnostics,
            interrupted=result.interrupted,
        )

    def trigger_resume(self) -> bool:
        """Ask the converter to resume its own unfinished jobs."""
        LOG.info("Resuming converter jobs via %s", self.executable)
        result = self._execute([self.executable, "resume"])
        if result.returncode == 0 and not result.interrupted and result.start_error is None:
            return True
        LOG.error("Resume failed: %s", _describe_failure(result))
        return False

    def _execute(self, cmd: Sequence[str]) -> _ProcessResult:
        try:
            proc = subprocess.Popen(
                list(cmd),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            return _ProcessResult(returncode=None, stdout="", stderr="", start_error=str(exc))
        try:
            stdout, stderr = proc.communicate()
        except KeyboardInterrupt:
            # Stop this job only; the caller decides whether the batch goes on.
            LOG.warning("Interrupt received; stopping converter process %s", proc.pid)
            proc.send_signal(signal.SIGINT)
            stdout, stderr = proc.communicate()
            return _ProcessResult(
                returncode=proc.returncode,
                stdout=stdout or "",
                stderr=stderr or "",
                interrupted=True,
            )
        return _ProcessResult(returncode=proc.returncode, stdout=stdout or "", stderr=stderr or "")


__all__ = ["ConverterGateway", "JobOutcome", "JobStatus"]
