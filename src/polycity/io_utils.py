from __future__ import annotations

import os
import tempfile
from pathlib import Path, PurePosixPath
from typing import List, Union

PathLike = Union[str, Path]


def ensure_directory(path: PathLike) -> None:
    Path(path).mkdir(parents=True, exist_ok=True)


def ensure_parent_directory(path: PathLike) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def join_path(base: PathLike, *parts: str) -> Path:
    path = Path(base)
    for part in parts:
        if part:
            path /= part
    return path


def path_suffix(path: PathLike) -> str:
    """Return the final extension of ``path`` exactly as written (no case folding)."""
    name = path_name(path)
    idx = name.rfind(".")
    return "" if idx <= 0 else name[idx:]


def path_stem(path: PathLike) -> str:
    name = path_name(path)
    suffix = path_suffix(path)
    return name[: -len(suffix)] if suffix else name


def path_name(path: PathLike) -> str:
    return Path(path).name


def relative_posix(path: PathLike, root: PathLike) -> str:
    """Relative path of ``path`` under ``root`` with forward slashes."""
    rel = Path(path).relative_to(Path(root))
    return PurePosixPath(*rel.parts).as_posix()


def read_text(path: PathLike, encoding: str = "utf-8") -> str:
    return Path(path).read_text(encoding=encoding)


def write_text(path: PathLike, data: str, encoding: str = "utf-8") -> None:
    """Replace ``path`` with ``data`` atomically; a failed write leaves the old file."""
    target = Path(path)
    ensure_parent_directory(target)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding=encoding) as handle:
            handle.write(data)
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, target)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def list_directory(path: PathLike) -> List[Path]:
    """Immediate entries of ``path`` sorted by name."""
    p = Path(path)
    if not p.exists() or not p.is_dir():
        raise FileNotFoundError(f"Directory does not exist: {path}")
    return sorted(p.iterdir(), key=lambda entry: entry.name)


def list_subdirectories(path: PathLike) -> List[Path]:
    return [entry for entry in list_directory(path) if entry.is_dir()]


def file_exists(path: PathLike) -> bool:
    return Path(path).is_file()
