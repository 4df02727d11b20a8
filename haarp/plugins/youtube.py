"""Cache keys for video streams and thumbnails of the video site."""

from __future__ import annotations

import re

from haarp.plugins.common import Match
from haarp.strutil import regex_match, search_replace, string_explode

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")

_QUERY_REJECT_PATTERNS = (
    r"[\?&]begin=[0-9]*[1-9]+[0-9]*",
    r"[\?&]cms_redirect=yes(&.*)?$",
    r"[\?&]redirect_counter=1(&.*)?$",
)
_QUERY_REJECT_TEXT = ("&ir=1", "&rr=12", "source=yt_live", "&otf=1")
_PATH_REJECT_PATTERNS = (
    r"begin[/=][0-9]*[1-9]+[0-9]*",
    r"cms_redirect[=/]yes",
    r"redirect_counter[=/]1",
    r"[\?&/]ir[=/]1",
    r"[\?&/]rr[=/]12",
    r"source[=/]yt_live",
    r"[\?&/]otf[/=]1",
    r"cmd2[=/]0",
)
_MAX_ID_LENGTH = 40
_STORYBOARD = r"M[0-9]*.jpg\?sigh=[_a-zA-Z0-9\-]*$"


def _atoll(text: str) -> int:
    found = _LEADING_INT.match(text)
    return int(found.group(1)) if found else 0


def parse_range(value: str) -> tuple[int, int]:
    """Parse ``"a-b"`` into ``(a, b)``."""
    bounds = string_explode(value, "-")
    if len(bounds) < 2:
        raise ValueError(f"malformed range: {value!r}")
    return _atoll(bounds[0]), _atoll(bounds[1])


def path_value(pattern: str, url: str, index: int) -> str:
    """Component ``index`` of the text matching ``pattern``, split on "/"; "" if absent."""
    parts = string_explode(regex_match(pattern, url), "/")
    if len(parts) <= index:
        return ""
    return parts[index]


def _clen_inside_range(info: Match) -> bool:
    clen = info.total_file_size
    return bool(clen) and info.range_min <= clen <= info.range_max


def video_from_query(url: str) -> Match:
    """Read the stream key and range from a query-string style URL.

    ``file`` is empty when the URL must not be cached.
    """
    info = Match()
    itag = mime = ""
    has_cm2 = has_range = has_watch_id = False

    pieces = string_explode(url, "?")
    if len(pieces) > 1:
        for param in string_explode(pieces[-1], "&"):
            values = string_explode(param, "=")
            if len(values) < 2:
                continue
            key, value = values[0], values[1]
            if key in ("id", "video_id") and not has_watch_id:
                info.file = value if len(value) <= _MAX_ID_LENGTH else ""
            elif key == "itag" and value != "34":
                itag = "-" + value
            elif key == "range":
                has_range = True
                try:
                    info.range_min, info.range_max = parse_range(value)
                except ValueError:
                    info.file = ""
                    return info
                info.exist_range = True
            elif key == "cm2" and value == "0":
                has_cm2 = True
            elif key == "clen":
                info.total_file_size = _atoll(value)
            elif key == "watchid":
                info.file = value
                has_watch_id = True
            elif key == "mime":
                if "video" in value:
                    mime = "-vid"
                elif "audio" in value:
                    mime = "-aud"

    if has_cm2 and not has_range:
        info.file = ""
        return info
    if info.file:
        info.file += itag + mime
    if _clen_inside_range(info):
        info.file = ""
    return info


def video_from_path(url: str) -> Match:
    """Read the stream key and range from a path style URL.

    ``file`` is empty when the URL must not be cached.
    """
    info = Match()
    pieces = string_explode(url, "?")
    if len(pieces) != 2:
        return info

    code = ""
    has_watch_id = False
    for param in string_explode(pieces[1], "&"):
        values = string_explode(param, "=")
        if len(values) == 2 and values[0] == "watchid":
            code = values[1]
            has_watch_id = True
            break

    directory = pieces[0]
    if not has_watch_id:
        code = path_value(r"/id/\w{16}/", directory, 1)
        if not code:
            return info

    itag = path_value(r"/itag/[0-9]+/", directory, 1)
    kind = "vid" if "/mime/video" in directory else "aud"
    info.file = f"{code}-{itag}-{kind}"

    try:
        info.range_min, info.range_max = parse_range(
            path_value(r"/range/[0-9]+-[0-9]+$", directory, 1)
        )
    except ValueError:
        info.file = ""
        return info
    info.exist_range = True

    info.total_file_size = _atoll(path_value(r"/clen/[0-9]+/", directory, 1))
    if _clen_inside_range(info):
        info.file = ""
    return info


def watch_id(url: str) -> str:
    """Value of the ``v`` parameter of a watch-page URL, or ""."""
    url, _ = search_replace(url, "?", "&")
    pieces = string_explode(url, "/")
    if len(pieces) <= 1:
        return ""
    for param in string_explode(pieces[-1], "&"):
        values = string_explode(param, "=")
        if len(values) == 2 and values[0] == "v":
            return values[1]
    return ""


def _finish(info: Match) -> Match:
    if info.file:
        info.match = True
        info.domain = "youtube"
        info.file += ".flv"
    else:
        info.match = False
    return info


def match_youtube(url: str) -> Match:
    """Decide whether a video URL is cacheable and under which key."""
    if "/videoplayback?" in url:
        rejected = any(regex_match(p, url) for p in _QUERY_REJECT_PATTERNS) or any(
            text in url for text in _QUERY_REJECT_TEXT
        )
        return Match() if rejected else _finish(video_from_query(url))
    if "/videoplayback/" in url:
        rejected = any(regex_match(p, url) for p in _PATH_REJECT_PATTERNS)
        return Match() if rejected else _finish(video_from_path(url))
    if ".com/watch?" in url:
        found = watch_id(url)
        if found:
            return Match(match=False, domain="youtube_IDs", file=found)
    return Match()


def _thumbnail_name(url: str) -> str:
    parts = string_explode(url, "/")
    if len(parts) < 2:
        raise ValueError(f"no thumbnail path in {url!r}")
    name = parts[-2]
    if "hqdefault.jpg" in url:
        name += "-hq"
    elif "mqdefault.jpg" in url:
        name += "-mq"
    else:
        found = regex_match(_STORYBOARD, parts[-1])
        if not found:
            return ""
        end = found.find(".jpg")
        frame = found[1:] if end == -1 else found[1:end]
        name = found[found.find("sigh=") + 5:] + "-" + frame
    return name + ".jpg"


def match_ytimg(url: str) -> Match:
    """Decide whether a thumbnail URL is cacheable and under which key."""
    name = _thumbnail_name(url)
    if not name:
        return Match()
    return Match(match=True, domain="ytimg", file=name)