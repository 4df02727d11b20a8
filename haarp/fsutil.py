"""File and disk helpers for the cache directory."""

from __future__ import annotations

import os

from haarp.strutil import string_explode


def file_exists(path: str) -> bool:
    """True if ``path`` exists."""
    return os.path.exists(path)


def file_size(path: str) -> int:
    """Size in bytes, or -1 if the file cannot be examined."""
    try:
        return os.stat(path).st_size
    except OSError:
        return -1


def mkdir_p(path: str) -> None:
    """Create ``path`` and any missing parents."""
    os.makedirs(path, mode=0o777, exist_ok=True)


def get_file_path(path: str) -> str:
    """Directory part of ``path`` with leading and trailing slashes."""
    parts = string_explode(path, "/")
    if len(parts) < 2:
        raise ValueError(f"path has no directory part: {path!r}")
    return "/" + "".join(part + "/" for part in parts[:-1])


def get_filename(path: str) -> str:
    """Last component of ``path``."""
    parts = string_explode(path, "/")
    if not parts:
        raise ValueError(f"path has no components: {path!r}")
    return parts[-1]


def file_get_modif(path: str) -> int:
    """Modification time in whole seconds, or 0 if the file cannot be examined."""
    try:
        return int(os.stat(path).st_mtime)
    except OSError:
        return 0


def file_set_modif(path: str, mtime: int = 0) -> None:
    """Set access and modification times to ``mtime + 10``, or to 0 if ``mtime`` is not positive."""
    stamp = mtime + 10 if mtime > 0 else 0
    os.utime(path, (stamp, stamp))


def disk_use(path: str) -> float:
    """Percentage of the filesystem holding ``path`` that is in use."""
    info = os.statvfs(path)
    total = float(info.f_bsize) * info.f_blocks
    free = float(info.f_bsize) * info.f_bfree
    if total == 0:
        raise OSError(f"filesystem of {path!r} reports no blocks")
    return (total - free) / total * 100


def disk_size(path: str) -> float:
    """Total size in bytes of the filesystem holding ``path``."""
    info = os.statvfs(path)
    return float(info.f_bsize) * info.f_blocks


def disk_occupation(path: str) -> float:
    """Bytes in use on the filesystem holding ``path``."""
    info = os.statvfs(path)
    return float(info.f_bsize) * (float(info.f_blocks) - float(info.f_bfree))