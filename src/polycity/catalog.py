from __future__ import annotations

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, Sequence, Union

from .config import DEFAULT_FRAGMENT_NAME, DEFAULT_READ_WORKERS
from .envelope import Bounds, compute_bounds, envelope_feature
from .errors import CatalogWriteError, FragmentReadError
from .io_utils import join_path, read_text, relative_posix, write_text

LOG = logging.getLogger(__name__)

CATALOG_NAME = DEFAULT_FRAGMENT_NAME


@dataclass(frozen=True, slots=True)
class EnvelopeRecord:
    """Envelope of one output unit's fragment."""

    id: str
    path: str
    bounds: Bounds

    def to_feature(self) -> Dict[str, Any]:
        return envelope_feature(self.bounds, {"id": self.id, "path": self.path})


@dataclass(slots=True)
class AggregationReport:
    records: list[EnvelopeRecord] = field(default_factory=list)
    failures: list[FragmentReadError] = field(default_factory=list)


def _absolute(output_dir: Path, fragment: Union[str, Path]) -> Path:
    path = Path(fragment)
    return path if path.is_absolute() else join_path(output_dir, str(fragment))


def load_record(output_dir: Path, fragment: Union[str, Path]) -> EnvelopeRecord:
    """Read one fragment and compute its envelope record."""
    full_path = _absolute(output_dir, fragment)
    try:
        rel_path = relative_posix(full_path, output_dir)
    except ValueError as exc:
        raise FragmentReadError(str(full_path), f"not under output root {output_dir}") from exc
    try:
        text = read_text(full_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise FragmentReadError(rel_path, f"cannot read file: {exc}") from exc
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise FragmentReadError(rel_path, f"invalid JSON: {exc}") from exc
    except RecursionError as exc:
        raise FragmentReadError(rel_path, "JSON nested too deeply") from exc
    try:
        bounds = compute_bounds(document)
    except ValueError as exc:
        raise FragmentReadError(rel_path, str(exc)) from exc
    except RecursionError as exc:
        raise FragmentReadError(rel_path, "geometry nested too deeply") from exc
    unit_id = PurePosixPath(rel_path).parent.as_posix()
    return EnvelopeRecord(id=unit_id, path=rel_path, bounds=bounds)


def _try_load(output_dir: Path, fragment: Union[str, Path]) -> Union[EnvelopeRecord, FragmentReadError]:
    try:
        return load_record(output_dir, fragment)
    except FragmentReadError as exc:
        return exc


def aggregate(
    output_dir: Path,
    fragments: Sequence[Union[str, Path]],
    *,
    workers: int = DEFAULT_READ_WORKERS,
    strict: bool = False,
) -> AggregationReport:
    """Compute envelope records for ``fragments``.

    Fragments are read concurrently but records keep the order of
    ``fragments``. Unreadable fragments are reported and left out, unless
    ``strict`` is set, in which case the first one (in input order) is raised.
    """
    report = AggregationReport()
    if not fragments:
        return report
    max_workers = max(1, min(workers, len(fragments)))
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(pool.map(lambda item: _try_load(output_dir, item), fragments))
    for result in results:
        if isinstance(result, FragmentReadError):
            if strict:
                raise result
            LOG.warning("Skipping fragment %s: %s", result.path, result.reason)
            report.failures.append(result)
            continue
        report.records.append(result)
    return report


def build_catalog(records: Iterable[EnvelopeRecord]) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [record.to_feature() for record in records],
    }


def write_catalog(
    output_dir: Path, catalog: Dict[str, Any], name: str = CATALOG_NAME
) -> Path:
    """Write ``catalog`` to the output root, replacing any earlier catalog."""
    target = join_path(output_dir, name)
    try:
        write_text(target, json.dumps(catalog, separators=(",", ":")))
    except OSError as exc:
        raise CatalogWriteError(f"Failed to write catalog {target}: {exc}") from exc
    LOG.info("Wrote catalog with %d envelope(s) to %s", len(catalog["features"]), target)
    return target


__all__ = [
    "AggregationReport",
    "CATALOG_NAME",
    "EnvelopeRecord",
    "aggregate",
    "build_catalog",
    "load_record",
    "write_catalog",
]
