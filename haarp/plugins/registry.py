"""Lookup of URL plugins by name and a command to try one on a URL."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Callable

from haarp.plugins import downloads, games, video, youtube
from haarp.plugins.common import Match
from haarp.timeutil import elapsed_ms, now

Plugin = Callable[[str], Match]

_PLUGINS: dict[str, Plugin] = {
    "porntube.com": video.match_porntube,
    "rad.msn.com": downloads.match_rad_msn,
    "redtubefiles.com": video.match_redtubefiles,
    "rncdn3.com": video.match_rncdn3,
    "serviporno.com": video.match_serviporno,
    "socialpointgames.com": games.SocialPointGames(),
    "sonicomusica.com": downloads.match_sonicomusica,
    "speedtest.net": downloads.match_speedtest,
    "steampowered.com": downloads.match_steampowered,
    "submanga.com": downloads.match_submanga,
    "symantecliveupdate.com": downloads.match_symantecliveupdate,
    "telaxo.com": games.match_telaxo,
    "terra.com": video.match_terra,
    "tetrisfb.com": games.match_tetrisfb,
    "tumblr.com": video.match_tumblr,
    "turner.com": downloads.match_turner,
    "uol.com.br": video.match_uol,
    "vevos.biz": downloads.match_vevos,
    "viddler.com": video.match_viddler,
    "video.msn.com": video.match_msn_video,
    "vimeo.com": video.match_vimeo,
    "vostucdn.com": games.match_vostucdn,
    "vsh.r7.com": video.match_r7,
    "wooga.com": games.match_wooga,
    "wrzuta.pl": video.match_wrzuta,
    "xtube.com": video.match_xtube,
    "xvideos.com": video.match_xvideos,
    "youku.com": video.match_youku,
    "youtube.com": youtube.match_youtube,
    "ytimg.com": youtube.match_ytimg,
    "zgncdn.com": games.Zgncdn(),
    "ziddu.com": downloads.match_ziddu,
}


def _normalise(name: str) -> str:
    name = os.path.basename(name)
    if name.endswith(".so"):
        name = name[: -len(".so")]
    return name


def get_plugin(name: str) -> Plugin:
    """Return the plugin for a site name; a path or ``.so`` suffix is ignored."""
    key = _normalise(name)
    try:
        return _PLUGINS[key]
    except KeyError:
        raise KeyError(f"no plugin named {key!r}") from None


def plugin_names() -> list[str]:
    """Names of all plugins, sorted."""
    return sorted(_PLUGINS)


def run_plugin(name: str, url: str) -> Match:
    """Apply the named plugin to ``url``."""
    return get_plugin(name)(url)


def main(argv: list[str] | None = None) -> int:
    """Run one plugin on one URL and print what it decided."""
    parser = argparse.ArgumentParser(description="Try a URL plugin on a URL.")
    parser.add_argument("plugin", help="plugin name, e.g. youtube.com")
    parser.add_argument("url", help="URL without scheme or with it")
    args = parser.parse_args(argv)

    start = now()
    try:
        plugin = get_plugin(args.plugin)
    except KeyError as exc:
        print(f"Cannot open plugin: {exc.args[0]}", file=sys.stderr)
        return 1
    try:
        result = plugin(args.url)
    except ValueError as exc:
        print(f"Plugin failed: {exc}", file=sys.stderr)
        return 1

    print(f"Match: {int(result.match)}")
    print(f"Domain: {result.domain}")
    print(f"File: {result.file}")
    print(f"range_min: {result.range_min}")
    print(f"range_max: {result.range_max}")
    print(f"total_file_size: {result.total_file_size}")
    print(f"Time: {elapsed_ms(start, now()):.5f} msec.")
    return 0


if __name__ == "__main__":
    sys.exit(main())