"""Result type and helpers shared by the URL plugins."""

from __future__ import annotations

from dataclasses import dataclass

from haarp.strutil import string_explode


@dataclass
class Match:
    """What a plugin decided about a URL.

    ``file`` and ``domain`` name the cache entry; ``range_min``/``range_max``
    give a requested byte range and ``total_file_size`` the announced size.
    """

    match: bool = False
    domain: str = ""
    file: str = ""
    range_min: int = 0
    range_max: int = 0
    total_file_size: int = 0
    exist_range: bool = False


def filename_from_url(url: str) -> str:
    """Last path component of ``url``, ignoring any query string."""
    if "?" in url:
        pieces = string_explode(url, "?")
        if len(pieces) < 2:
            raise ValueError(f"no file name in {url!r}")
        pieces += string_explode(pieces[-2], "/")
        return pieces[-1]
    pieces = string_explode(url, "/")
    if not pieces:
        raise ValueError(f"no file name in {url!r}")
    return pieces[-1]