"""Per-client download accounting stored alongside cached files."""

from __future__ import annotations

import re
from dataclasses import dataclass

from haarp.strutil import string_explode

_SCANNED_INT = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


@dataclass
class UserCache:
    """Traffic one client produced for a cached file."""

    ip: str
    date_downloaded: int
    date_modified: int
    bytes_accumulated: int = 0
    bytes_requested: int = 0


def _scan_int(text: str) -> int:
    """Read a leading integer, detecting hex and octal prefixes."""
    found = _SCANNED_INT.match(text)
    if found is None:
        raise ValueError(f"not an integer: {text!r}")
    sign, digits = found.groups()
    if digits[:2].lower() == "0x":
        value = int(digits[2:], 16)
    elif len(digits) > 1 and digits[0] == "0":
        value = int(digits[1:], 8)
    else:
        value = int(digits)
    return -value if sign == "-" else value


def add_user_cache(
    entries: list[UserCache], ip: str, date_modified: int, nbytes: int, hit: bool
) -> None:
    """Record ``nbytes`` for ``ip``: served from cache if ``hit``, else downloaded."""
    for entry in entries:
        if entry.ip == ip:
            entry.date_modified = date_modified
            if hit:
                entry.bytes_requested += nbytes
            else:
                entry.bytes_accumulated += nbytes
            return
    entry = UserCache(ip=ip, date_downloaded=date_modified, date_modified=date_modified)
    if hit:
        entry.bytes_requested = nbytes
    else:
        entry.bytes_accumulated = nbytes
    entries.append(entry)


def parse_user_cache(text: str) -> list[UserCache]:
    """Parse ``ip,downloaded,modified,accumulated,requested`` records joined by ";"."""
    entries = []
    for record in string_explode(text, ";"):
        fields = string_explode(record, ",")
        if len(fields) != 5:
            raise ValueError(f"malformed user cache record: {record!r}")
        ip, *numbers = fields
        downloaded, modified, accumulated, requested = map(_scan_int, numbers)
        entries.append(
            UserCache(
                ip=ip,
                date_downloaded=downloaded,
                date_modified=modified,
                bytes_accumulated=accumulated,
                bytes_requested=requested,
            )
        )
    return entries


def format_user_cache(entries: list[UserCache]) -> str:
    """Serialise entries, most recently modified first."""
    ordered = sorted(entries, key=lambda entry: entry.date_modified, reverse=True)
    return ";".join(
        f"{e.ip},{e.date_downloaded},{e.date_modified},"
        f"{e.bytes_accumulated},{e.bytes_requested}"
        for e in ordered
    )