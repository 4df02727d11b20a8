"""Cache keys for software downloads, file hosts and small media sites."""

from __future__ import annotations

from haarp.plugins.common import Match, filename_from_url
from haarp.strutil import search_replace, string_explode

BANNER_URL = "banner.example.com:8080/msn.htm"

_MAX_SPEEDTEST_PARTS = 6


def _keyed(name: str, domain: str) -> Match:
    if not name:
        return Match()
    return Match(match=True, domain=domain, file=name)


def _depot_chunk_name(url: str) -> str:
    name = ""
    state = 0
    for part in string_explode(url, "/"):
        if state == 1:
            name = part
            state = 0
        if state == 2:
            pieces = string_explode(part, "?")
            if not pieces:
                raise ValueError(f"no chunk name in {url!r}")
            return f"{name}_{pieces[0]}"
        if part == "depot":
            state = 1
        if part == "chunk":
            state = 2
    return ""


def match_steampowered(url: str) -> Match:
    """Game depot chunks, keyed by depot number and chunk hash.

    Every URL is accepted; the file is empty when no chunk is named.
    """
    return Match(match=True, domain="steampowered", file=_depot_chunk_name(url))


def match_symantecliveupdate(url: str) -> Match:
    """Archives and installers of the update service."""
    if ".symantecliveupdate.com/" in url and (".zip" in url or ".exe" in url):
        return _keyed(filename_from_url(url), "symantecliveupdate")
    return Match()


def match_ziddu(url: str) -> Match:
    """Files of the download host."""
    if "downloads.ziddu.com/downloadfiles" in url:
        return _keyed(filename_from_url(url), "ziddu")
    return Match()


def _manga_page_name(url: str) -> str:
    parts = string_explode(url, "/")
    if len(parts) < 3:
        raise ValueError(f"too few path components in {url!r}")
    prefix = "hd-" if ".submanga.com/hdpages/" in url else ""
    return prefix + "-".join(parts[-3:])


def match_submanga(url: str) -> Match:
    """Page images, keyed by the last three path components."""
    pages = ".submanga.com/pages/" in url or ".submanga.com/hdpages/" in url
    if pages and "?" not in url:
        return _keyed(_manga_page_name(url), "submanga")
    return Match()


def _speedtest_name(url: str) -> str:
    url, _ = search_replace(url, "?", "/")
    parts = string_explode(url, "/")
    if len(parts) > _MAX_SPEEDTEST_PARTS:
        return ""
    if len(parts) < 2:
        raise ValueError(f"too few path components in {url!r}")
    return parts[-2]


def match_speedtest(url: str) -> Match:
    """Test images and latency files of speed test servers."""
    return _keyed(_speedtest_name(url), "speedtest")


def match_rad_msn(url: str) -> Match:
    """Rewrite ad client requests to a local banner page."""
    if "rad.msn.com/ADSAdClient31.dll?" in url:
        return Match(match=True, domain="rewrite", file=BANNER_URL)
    return Match()


def match_sonicomusica(url: str) -> Match:
    """Music files of the site; images only when they are also music files."""
    if ".sonicomusica.com/" in url and (".sm3" in url or ".jpg" not in url):
        return _keyed(filename_from_url(url), "sonicomusica")
    return Match()


def match_turner(url: str) -> Match:
    """MP3 files of the media network."""
    if ".turner.com/" in url and ".mp3" in url:
        return _keyed(filename_from_url(url), "turner")
    return Match()


def match_vevos(url: str) -> Match:
    """Any file of the vevos site."""
    if "vevos.biz" in url:
        return _keyed(filename_from_url(url), "vevos.biz")
    return Match()