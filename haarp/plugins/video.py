"""Cache keys for video and media hosting sites."""

from __future__ import annotations

import re

from haarp.plugins.common import Match, filename_from_url
from haarp.strutil import regex_match, search_replace, string_explode

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_FS_PARAM = r"[\?&]fs=[0-9]+"


def _atoll(text: str) -> int:
    found = _LEADING_INT.match(text)
    return int(found.group(1)) if found else 0


def _pieces(text: str, separators: str) -> list[str]:
    pieces = string_explode(text, separators)
    if not pieces:
        raise ValueError(f"nothing to split in {text!r}")
    return pieces


def _last_component(url: str) -> str:
    return _pieces(url, "/")[-1]


def _query_part(name: str) -> str:
    pieces = string_explode(name, "?")
    if len(pieces) < 2:
        raise ValueError(f"no query string in {name!r}")
    return pieces[1]


def _keyed(name: str, domain: str) -> Match:
    if not name:
        return Match()
    return Match(match=True, domain=domain, file=name)


def _joined_tail(url: str, first: int) -> tuple[list[str], str]:
    parts = string_explode(url, "/")
    if len(parts) < first:
        raise ValueError(f"too few path components in {url!r}")
    prefix = "".join(part + "_" for part in parts[-first:-1])
    return parts, prefix


def match_porntube(url: str) -> Match:
    """Videos from their start, and images without a query string."""
    if "videos" in url:
        if "start=" in url and not regex_match(r"(\?|&)start=0(&|$)", url):
            return Match()
        parts, prefix = _joined_tail(url, 10)
        return Match(
            match=True,
            domain="porntube_vid",
            file=prefix + _pieces(parts[-1], "?")[0],
        )
    if "?" in url:
        return Match()
    parts, prefix = _joined_tail(url, 11)
    return Match(match=True, domain="porntube_img", file=prefix + parts[-1])


def _redtube_name(url: str) -> str:
    last = _last_component(url)
    if ".flv?" in url:
        return _pieces(last, "?")[0]
    return last if regex_match(r".flv$", last) else ""


def match_redtubefiles(url: str) -> Match:
    """Flash videos requested from their start."""
    if ("start=" in url and not regex_match(r"(\?|&)start=0(&|$)", url)) or (
        "ec_seek" in url and not regex_match(r"(\?|&)ec_seek=0(&|$)", url)
    ):
        return Match()
    return _keyed(_redtube_name(url), "redtubefiles")


def match_rncdn3(url: str) -> Match:
    """Videos of the content network unless a start offset is given."""
    last, _ = search_replace(_last_component(url), "?", "/")
    name = _pieces(last, "/")[0]
    if name and not regex_match(r"[&\?]ms=[0-9]+", url):
        return Match(match=True, domain="pornhub_vid", file=name)
    return Match(file=name)


def match_serviporno(url: str) -> Match:
    """Any file of the serviporno site."""
    if ".serviporno.com/" in url:
        return _keyed(filename_from_url(url), "serviporno")
    return Match()


def match_vimeo(url: str) -> Match:
    """Videos requested without a time or start offset."""
    if regex_match(r"[&?]\w*(time|start)", url):
        return Match()
    last = _last_component(url)
    if "?" in last:
        last = _pieces(last, "?")[0]
    return _keyed(last, "vimeo")


def match_xtube(url: str) -> Match:
    """Videos, recording a byte offset given as ``fs``."""
    last = _last_component(url)
    info = Match()
    if "?" in last:
        query = _query_part(last)
        found = regex_match(_FS_PARAM, query)
        if found:
            info.range_min = _atoll(found[4:])
            info.range_max = -1
        last = _pieces(last, "?")[0]
    if last:
        info.match = True
        info.domain = "xtube"
        info.file = last
    return info


def _xvideos_name(url: str) -> str:
    last = _last_component(url)
    if "?" in url:
        if "?" in last:
            if regex_match(_FS_PARAM, _query_part(last)):
                return ""
        else:
            raise ValueError(f"no query string in {last!r}")
        last = _pieces(last, "?")[0]
    return last.split(";", 1)[0]


def match_xvideos(url: str) -> Match:
    """Videos requested without an ``fs`` byte offset."""
    return _keyed(_xvideos_name(url), "xvideos")


def match_youku(url: str) -> Match:
    """Any file, keyed by its last path component."""
    return _keyed(_last_component(url), "youku")


def match_tumblr(url: str) -> Match:
    """Files without a query string."""
    if "?" in url:
        return Match()
    return Match(match=True, domain="tumblr", file=_last_component(url))


def match_r7(url: str) -> Match:
    """Files without a query string."""
    if "?" in url:
        return Match()
    return _keyed(_last_component(url), "r7")


def match_viddler(url: str) -> Match:
    """Flash videos of the viddler site."""
    if "viddler.com/" in url and ".flv" in url:
        return _keyed(filename_from_url(url), "viddler")
    return Match()


def match_msn_video(url: str) -> Match:
    """Shared videos of the video catalogue."""
    if ".catalog.video.msn.com/" in url and "share" in url:
        return _keyed(filename_from_url(url), "msn_video")
    return Match()


def match_terra(url: str) -> Match:
    """Flash videos of the terra site."""
    if ".terra.com" in url and ".flv" in url:
        return _keyed(filename_from_url(url), "terra")
    return Match()


def match_uol(url: str) -> Match:
    """Any flash video."""
    if ".flv" in url:
        return _keyed(filename_from_url(url), "uol")
    return Match()


def match_wrzuta(url: str) -> Match:
    """Any file, stored with an ``.mp4`` suffix."""
    return Match(match=True, domain="wrzuta", file=filename_from_url(url) + ".mp4")