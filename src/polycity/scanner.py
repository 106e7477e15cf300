from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .config import DEFAULT_FRAGMENT_NAME
from .io_utils import file_exists, join_path

LOG = logging.getLogger(__name__)


def fragment_path(unit_dir: Path, fragment_name: str = DEFAULT_FRAGMENT_NAME) -> Path:
    return join_path(unit_dir, fragment_name)


def find_fragments(
    output_dir: Path,
    unit_dirs: Iterable[Path],
    fragment_name: str = DEFAULT_FRAGMENT_NAME,
) -> list[Path]:
    """Return the fragment file of each unit that has one, in unit order.

    Units without a fragment (failed or empty conversions) are left out.
    """
    found: list[Path] = []
    for unit_dir in unit_dirs:
        unit_path = Path(unit_dir)
        if not unit_path.is_absolute():
            unit_path = join_path(output_dir, str(unit_dir))
        candidate = fragment_path(unit_path, fragment_name)
        if file_exists(candidate):
            found.append(candidate)
        else:
            LOG.debug("No %s in %s", fragment_name, unit_path)
    LOG.info("Found %d fragment(s) under %s", len(found), output_dir)
    return found


__all__ = ["find_fragments", "fragment_path"]
