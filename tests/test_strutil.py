import pytest

from haarp.strutil import (
    BASE64_CHARS,
    ValueType,
    base64_encode,
    convert_char,
    get_domain,
    get_file_extension,
    get_file_name,
    get_header_value,
    match_begin,
    match_substr,
    regex_match,
    regex_match_nocase,
    remove_param,
    search_replace,
    search_replace_any,
    split_string,
    split_string_nocase,
    string_explode,
    string_explode_trim,
    trim,
    upper_case,
    url_to_request,
)

HEADER = (
    "HTTP/1.1 200 OK\r\n"
    "Content-Length: 1234\r\n"
    "Last-Modified: Tue, 15 Nov 1994 08:12:31 GMT\r\n"
    "\r\n"
)


def test_upper_case_ascii_only():
    assert upper_case("abc-Xyz_09") == "abc-Xyz_09".upper()
    assert upper_case("é") == "é"


def test_trim():
    assert trim(" \t a b \t") == "a b"
    assert trim(" \t ") == ""


def test_search_replace_counts():
    text = "a.b.c"
    assert search_replace(text, ".", "/") == (text.replace(".", "/"), text.count("."))


def test_search_replace_rejects_empty_replacement():
    with pytest.raises(ValueError):
        search_replace("abc", "b", "")


def test_search_replace_any_allows_empty_replacement():
    result, count = search_replace_any("a-b-c", "-", "")
    assert result == "abc"
    assert count == "a-b-c".count("-")


def test_search_replace_any_rejects_empty_search():
    with pytest.raises(ValueError):
        search_replace_any("abc", "", "x")


def test_match_begin_and_substr():
    assert match_begin("GET / HTTP/1.1", "GET") is True
    assert match_begin("POST /", "GET") is False
    assert match_substr("abcabc", "bc") is True
    assert match_substr("abcabc", "bc", 1) is True
    assert match_substr("abcabc", "bc", 4) is False


def test_string_explode_drops_empty_pieces():
    assert string_explode("/a//b/", "/") == ["a", "b"]
    assert string_explode("a?b/c", "?/") == ["a", "b", "c"]
    assert string_explode("", "/") == []


def test_string_explode_trim():
    assert string_explode_trim("a , b,, c ", ",") == ["a", "b", "c"]


def test_split_string():
    assert split_string("a::b::::c", "::") == ["a", "b", "c"]
    with pytest.raises(ValueError):
        split_string("abc", "")


def test_split_string_nocase_keeps_original_case():
    assert split_string_nocase("xxANDyyandzz", "and") == ["xx", "yy", "zz"]


def test_regex_match():
    assert regex_match("[0-9]+", "abc123def") == "123"
    assert regex_match("[0-9]+", "abcdef") == ""
    assert regex_match("(", "abc") == ""
    assert regex_match("^b", "a\nb") == "b"


def test_regex_match_nocase():
    assert regex_match_nocase("abc", "xxABCxx") == "ABC"
    assert regex_match("abc", "xxABCxx") == ""


@pytest.mark.parametrize(
    "url, domain",
    [
        ("74.125.1.2", "youtube.com"),
        ("205.196.12.3/file", "mediafire.com"),
        ("speedtest.example.com/speedtest/random500x500.jpg", "speedtest.net"),
        ("12.34.56.7/youku/abc", "youku.com"),
        ("198.38.100.5/range/0-100", "netflix.com"),
        ("www.google.com/search", "google.com"),
        ("www.bbc.co.uk", "bbc.co.uk"),
        ("download.avg.com", "avg.com"),
        ("192.168.0.1/x", "192.168.0.1"),
        ("localhost", "localhost"),
        ("", ""),
    ],
)
def test_get_domain(url, domain):
    assert get_domain(url) == domain


def test_get_domain_short_two_label_name_fails():
    with pytest.raises(ValueError):
        get_domain("co.uk")


def test_url_to_request():
    assert url_to_request("host.com/a/b?c") == "/a/b?c"
    assert url_to_request("host.com") == "/"
    assert url_to_request("") == ""


def test_remove_param_middle_and_last():
    assert remove_param("a=1&b=2&c=3", "b=") == ("a=1&c=3", True)
    assert remove_param("a=1&b=2", "b=") == ("a=1", True)
    assert remove_param("a=1", "z=") == ("a=1", False)


def test_remove_param_at_start_without_separator_fails():
    with pytest.raises(ValueError):
        remove_param("b=2", "b=")


def test_convert_char_value():
    assert convert_char("abc") == "5/4_05"


@pytest.mark.parametrize("name", ["youtube", "video.flv", "ABC", "", "x"])
def test_convert_char_shape(name):
    result = convert_char(name)
    updir, rest = result.split("/")
    assert len(updir) == 1 and updir.isdigit()
    assert rest[1] == "_"
    assert convert_char(name) == result


def test_convert_char_too_small_sum_fails():
    with pytest.raises(ValueError):
        convert_char("00000000")


def test_base64_encode():
    assert base64_encode(b"") == ""
    assert base64_encode(b"\x00\x00\x00") == "nnnn"
    assert base64_encode(b"\xff\xff\xff") == BASE64_CHARS[63] * 4


@pytest.mark.parametrize("size", range(0, 10))
def test_base64_encode_length_and_alphabet(size):
    encoded = base64_encode(bytes(range(200, 200 + size)))
    assert len(encoded) == (4 * size + 2) // 3
    assert set(encoded) <= set(BASE64_CHARS[:64])


def test_file_extension_and_name():
    assert get_file_extension("video.flv") == "FLV"
    assert get_file_extension("noext") == "NOEXT"
    assert get_file_name("/a/b/c.mp4") == "c.mp4"
    assert get_file_name("c.mp4") == "c.mp4"


def test_get_header_value_int():
    assert get_header_value(HEADER, "Content-Length:", ValueType.INT) == "1234"
    assert get_header_value(HEADER, "content-length:", 0) == "1234"


def test_get_header_value_date():
    value = get_header_value(HEADER, "Last-Modified:", ValueType.DATE)
    assert value == "Tue, 15 Nov 1994 08:12:31 GMT"


def test_get_header_value_missing():
    assert get_header_value(HEADER, "Expires:", ValueType.DATE) == ""
    assert get_header_value(HEADER, "Last-Modified:", ValueType.INT) == ""