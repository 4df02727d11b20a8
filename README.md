# haarp

Building blocks for a caching HTTP proxy. The package works out which cache
entry a URL maps to, keeps track of which byte ranges of a file are already on
disk, and handles the sockets between the browser and the origin server.

## Installation

```
pip install .
```

For the test suite:

```
pip install .[test]
pytest
```

## Matching URLs with plugins

Each plugin takes a URL and returns a `haarp.plugins.common.Match`. It tells
whether the URL can be cached (`match`), the cache domain it belongs to
(`domain`), the file name to store it under (`file`), and any byte range or
announced size found in the URL (`range_min`, `range_max`, `total_file_size`,
`exist_range`).

Plugins are registered under site names such as `youtube.com`, `ytimg.com`,
`vimeo.com` or `steampowered.com`; `plugin_names()` lists them all. A leading
directory or a trailing `.so` on the name is ignored.

```python
from haarp.plugins.registry import plugin_names, run_plugin

print(plugin_names())
result = run_plugin("youtube.com", "http://example.com/videoplayback?id=abc&itag=18")
print(result.match, result.domain, result.file)   # True youtube abc-18.flv
```

An unknown name raises `KeyError`. The plugin functions can also be called
directly, for example `haarp.plugins.youtube.match_youtube(url)` or
`haarp.plugins.downloads.match_steampowered(url)`. The plugins are grouped in
`haarp.plugins.youtube`, `haarp.plugins.video`, `haarp.plugins.games` and
`haarp.plugins.downloads`. `games.SocialPointGames` and `games.Zgncdn` are
callable objects whose domain remembers the last game seen in a URL.

From the shell, run a plugin against a URL and print what it returns, along
with the time taken:

```
haarp-plugin youtube.com "http://example.com/videoplayback?id=abc&itag=18"
```

It exits with status 1 if the plugin is unknown or cannot handle the URL.

## Byte intervals

`haarp.intervals` records which parts of a file are cached and where they sit
on disk, as a list of `Interval(a, b, position)`; a position of `-1` means not
cached. `range_work(intervals, start, end)` splits a requested range into the
parts that can be served from disk and the parts that still have to be fetched,
and tells whether everything is cached. `append_node`, `append_sub_node` and
`point_end` extend the list as data is written; `generate_list` and
`list_to_strings` convert it to and from its stored text form.

## Per-user statistics

`haarp.usercache` keeps per-client byte counters in `UserCache` entries.
`add_user_cache` adds to them, and `parse_user_cache` and `format_user_cache`
read and write the stored text form (most recently modified first).

## Other helpers

- `haarp.strutil`: string splitting, regex matching, domain extraction,
  header value lookup, the cache's private base64 alphabet.
- `haarp.fsutil`: file and disk helpers.
- `haarp.timeutil`: timestamp parsing and formatting.
- `haarp.sockethandler.SocketHandler`: listening, accepting, connecting,
  buffered receive, timed send and tunnel waiting; failures raise
  `SocketError`.

## What the package does not do

There is no proxy process here: nothing reads a configuration file, accepts
browser connections and relays requests to origin servers, and no cache store
or log file is kept. The package supplies the pieces such a program uses.