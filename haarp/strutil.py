"""String, URL and header helpers used by the proxy and its URL plugins."""

from __future__ import annotations

import base64
import enum
import functools
import re
import string

BASE64_CHARS = (
    "nopq?rst@#u789+RST&UyzMNOPQhi"
    "abcdefgvwx$FGHIJKL"
    "012!34jklmA*BCDEVWXYZ56/"
)

_STANDARD_B64 = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"
_B64_TABLE = str.maketrans(_STANDARD_B64, BASE64_CHARS[:64])
_ASCII_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)

_KNOWN_ADDRESSES = (
    (
        r"^74\.125\.(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?)\."
        r"(25[0-5]|2[0-4][0-9]|[01]?[0-9][0-9]?$)",
        "youtube.com",
    ),
    (r"^(205\.196\.|199\.91\.)[0-9]{2,3}\.[0-9]{1,3}", "mediafire.com"),
    (
        r"^(\.|[a-z]|[0-9]|-)+(\/\w+)?(\/speedtest)+\/"
        r"(random[0-9]+x[0-9]+\.jpg|latency\.txt)",
        "speedtest.net",
    ),
    (r"^[0-9]{2,3}\.[0-9]{2,3}\.[0-9]{2,3}\.[0-9]{1,3}\/youku\/", "youku.com"),
    (r"198\.38\.(9[6-9]|1[0-2][0-9])\.[0-9]{1,3}\/range\/", "netflix.com"),
    (r"108\.175\.(3[2-9]|4[0-9])\.[0-9]{1,3}\/range\/", "netflix.com"),
)
_IPV4 = r"^[0-9]+\.[0-9]+\.[0-9]+\.[0-9]+$"
_DATE_SUFFIX = (
    r" ?\w{3}, [0-9]{1,2} \w{2,3} [0-9]{4} [0-9]+:[0-9]+:[0-9]+ [a-zA-Z]{3}"
)


class ValueType(enum.IntEnum):
    """Kind of value extracted from a header line."""

    INT = 0
    DATE = 1


def upper_case(text: str) -> str:
    """Upper-case ASCII letters only, leaving everything else untouched."""
    return text.translate(_ASCII_UPPER)


def trim(text: str) -> str:
    """Strip spaces and tabs from both ends."""
    return text.strip(" \t")


def search_replace(source: str, search: str, replace: str) -> tuple[str, int]:
    """Replace every occurrence of ``search``; ``replace`` must not be empty.

    Returns the new string and the number of replacements made.
    """
    if not replace:
        raise ValueError("replacement must not be empty")
    return search_replace_any(source, search, replace)


def search_replace_any(source: str, search: str, replace: str) -> tuple[str, int]:
    """Replace every occurrence of ``search``, allowing an empty replacement."""
    if not search:
        raise ValueError("search string must not be empty")
    return source.replace(search, replace), source.count(search)


def match_begin(hay: str, needle: str) -> bool:
    """True if ``hay`` starts with ``needle``."""
    return hay.startswith(needle)


def match_substr(hay: str, needle: str, startpos: int = -1) -> bool:
    """True if ``needle`` occurs in ``hay``; with ``startpos`` its first occurrence must be there."""
    if startpos == -1:
        return needle in hay
    return hay.find(needle) == startpos


def string_explode(text: str, separators: str) -> list[str]:
    """Split on any of the separator characters, dropping empty pieces."""
    if not separators:
        return [text] if text else []
    pattern = "[" + "".join(re.escape(char) for char in separators) + "]"
    return [piece for piece in re.split(pattern, text) if piece]


def string_explode_trim(text: str, separators: str) -> list[str]:
    """Like :func:`string_explode`, trimming spaces and tabs from each piece."""
    return [trim(piece) for piece in string_explode(text, separators)]


def split_string(text: str, separator: str) -> list[str]:
    """Split on a separator string, dropping empty pieces."""
    if not separator:
        raise ValueError("separator must not be empty")
    return [piece for piece in text.split(separator) if piece]


def split_string_nocase(text: str, separator: str) -> list[str]:
    """Split on a separator string matched without regard to ASCII case."""
    if not separator:
        raise ValueError("separator must not be empty")
    needle = upper_case(separator)
    hay = upper_case(text)
    pieces = []
    start = 0
    while (found := hay.find(needle, start)) != -1:
        if found > start:
            pieces.append(text[start:found])
        start = found + len(needle)
    if start < len(text):
        pieces.append(text[start:])
    return pieces


@functools.lru_cache(maxsize=256)
def _compile(pattern: str, flags: int) -> re.Pattern[str] | None:
    try:
        return re.compile(pattern, flags)
    except re.error:
        return None


def _search(pattern: str, line: str, flags: int) -> str:
    compiled = _compile(pattern, flags | re.MULTILINE)
    if compiled is None:
        return ""
    found = compiled.search(line)
    return found.group(0) if found else ""


def regex_match(pattern: str, line: str) -> str:
    """Return the first text matching ``pattern``, or "" if none or the pattern is invalid."""
    return _search(pattern, line, 0)


def regex_match_nocase(pattern: str, line: str) -> str:
    """Case-insensitive :func:`regex_match`."""
    return _search(pattern, line, re.IGNORECASE)


def get_domain(url: str) -> str:
    """Derive the cache domain from a URL without scheme."""
    for pattern, domain in _KNOWN_ADDRESSES:
        if regex_match(pattern, url):
            return domain
    if not url:
        return ""
    parts = string_explode(url, "/")
    if len(parts) > 1:
        url = parts[0]
    if regex_match(_IPV4, url):
        return url
    labels = string_explode(url, ".")
    if len(labels) <= 1:
        return url
    second, top = labels[-2], labels[-1]
    if len(second) <= 3 and len(top) <= 3 and second != "avg":
        if len(labels) < 3:
            raise ValueError(f"cannot determine domain of {url!r}")
        return f"{labels[-3]}.{second}.{top}"
    return f"{second}.{top}"


def url_to_request(url: str) -> str:
    """Return the path part of a URL without scheme, "/" if it has none."""
    if not url:
        return ""
    position = url.find("/")
    return url[position:] if position > 0 else "/"


def remove_param(url: str, param: str) -> tuple[str, bool]:
    """Remove the first query parameter starting with ``param``.

    Returns the new URL and whether anything was removed.
    """
    position = url.find(param)
    if position == -1:
        return url, False
    following = url.find("&", position)
    if following != -1:
        return url[:position] + url[following + 1:], True
    if position == 0:
        raise ValueError("parameter at start of URL has no preceding separator")
    return url[:position - 1], True


def _atoi(text: str) -> int:
    return int(text) if text else 0


def convert_char(text: str) -> str:
    """Map a name to a short cache sub-directory such as ``"5/4_05"``."""
    digits = "".join(
        str(ord(char) - 96) if "a" <= char <= "z"
        else char if char in string.digits
        else "27"
        for char in text
    )
    if len(digits) <= 3:
        digits += "282930"
    total = sum(int(digits[i:i + 3]) for i in range(0, len(digits) - 3, 3))
    tail = str(total)[-3:]
    if len(tail) < 2:
        raise ValueError(f"cannot derive a directory from {text!r}")
    updir = str(_atoi(tail[1:2]) + _atoi(tail[2:4]))
    if len(updir) > 1:
        updir = updir[1]
    return f"{updir}/{tail[0]}_{tail[1:]}"


def base64_encode(data: bytes) -> str:
    """Encode with the cache's private alphabet and no padding."""
    encoded = base64.b64encode(bytes(data)).decode("ascii").rstrip("=")
    return encoded.translate(_B64_TABLE)


def get_file_extension(name: str) -> str:
    """Upper-cased text after the last dot, or the whole name if there is none."""
    position = name.rfind(".")
    return upper_case(name[position + 1:] if position != -1 else name)


def get_file_name(name: str) -> str:
    """Text after the last slash."""
    return name[name.rfind("/") + 1:]


def get_header_value(header: str, label: str, value_type: ValueType | int) -> str:
    """Find the value following ``label`` in a raw header block, or ""."""
    value_type = ValueType(value_type)
    suffix = " ?[0-9]+" if value_type is ValueType.INT else _DATE_SUFFIX
    for line in string_explode(header, "\r\n"):
        if not regex_match_nocase(label, line):
            continue
        found = regex_match_nocase(label + suffix, line)
        if not found:
            continue
        pieces = split_string_nocase(found, label)
        if not pieces:
            raise ValueError(f"no value after {label!r}")
        return trim(pieces[0])
    return ""