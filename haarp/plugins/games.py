"""Cache keys for assets of browser games."""

from __future__ import annotations

from haarp.plugins.common import Match, filename_from_url

_MEDIA = (".jpg", ".png", ".mp3", ".swf")


def _contains_any(url: str, needles: tuple[str, ...]) -> bool:
    return any(needle in url for needle in needles)


def _by_filename(url: str, domain: str) -> Match:
    name = filename_from_url(url)
    if not name:
        return Match()
    return Match(match=True, domain=domain, file=name)


class SocialPointGames:
    """Matcher whose domain remembers the last game seen in a URL."""

    def __init__(self) -> None:
        self.domain = "socialpg"

    def __call__(self, url: str) -> Match:
        if "/dragoncity/" in url:
            self.domain = "socialpg_dragoncity"
        if "/socialwars/" in url:
            self.domain = "socialpg_socialwars"
        if "/socialempires/" in url:
            self.domain = "socialpg_socialempires"
        if ".socialpointgames.com/" in url and _contains_any(url, _MEDIA):
            return _by_filename(url, self.domain)
        return Match()


class Zgncdn:
    """Matcher whose domain remembers the last game seen in a URL."""

    _GAMES = (
        (("empire", "/empire/"), "GF_zgncdn_empire"),
        (("cityvillefb", "/city/"), "GF_zgncdn_city"),
        (("farmville", "/farm/"), "GF_zgncdn_farm"),
        (("castle", "/castle/"), "GF_zgncdn_castle"),
        (("bubblesafari", "/bubble/"), "GF_zgncdn_bubble"),
        (("familyville",), "GF_zgncdn_ville"),
        (("hog", "/hidden/"), "GF_zgncdn_hidden"),
    )

    def __init__(self) -> None:
        self.domain = "GF_zgncdn"

    def __call__(self, url: str) -> Match:
        for needles, domain in self._GAMES:
            if _contains_any(url, needles):
                self.domain = domain
        if ".zgncdn.com" in url and _contains_any(url, _MEDIA):
            return _by_filename(url, self.domain)
        return Match()


def match_telaxo(url: str) -> Match:
    """Images and media of the telaxo game site."""
    if (".telaxo.com/" in url and ".jpg" in url) or _contains_any(
        url, (".png", ".swf", ".mp3")
    ):
        return _by_filename(url, "GAMESF_telaxo")
    return Match()


def match_tetrisfb(url: str) -> Match:
    """Any file of the tetrisfb game site."""
    if ".tetrisfb.com" in url:
        return _by_filename(url, "GAMESF_tetrisfb")
    return Match()


def match_vostucdn(url: str) -> Match:
    """Images and media of the vostu content network."""
    if (".vostucdn.com/" in url and ".jpg" in url) or _contains_any(
        url, (".png", ".gif", ".swf", ".mp3")
    ):
        return _by_filename(url, "GAMESF_vostucdn")
    return Match()


def match_wooga(url: str) -> Match:
    """Images and media of the wooga game site."""
    if (".wooga.com/" in url and ".jpg" in url) or _contains_any(
        url, (".png", ".swf", ".mp3")
    ):
        return _by_filename(url, "GAMESF_wooga")
    return Match()