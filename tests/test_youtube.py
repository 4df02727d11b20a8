import pytest

from haarp.plugins.youtube import (
    match_youtube,
    match_ytimg,
    parse_range,
    path_value,
    video_from_path,
    video_from_query,
    watch_id,
)

QUERY_URL = (
    "http://r1.c.youtube.com/videoplayback?id=abcdef&itag=22"
    "&mime=video/mp4&range=0-1000&clen=5000"
)
PATH_URL = (
    "http://r1.c.youtube.com/videoplayback/id/0123456789abcdef/itag/18"
    "/mime/video/clen/9000/range/0-999?sparams=x"
)


def test_parse_range():
    assert parse_range("100-200") == (100, 200)


def test_parse_range_without_end_raises():
    with pytest.raises(ValueError):
        parse_range("100")


def test_path_value_and_missing_index():
    url = "host/videoplayback/id/x/itag/22/range/0-10"
    assert path_value(r"/itag/[0-9]+/", url, 1) == "22"
    assert path_value(r"/itag/[0-9]+/", url, 5) == ""


def test_query_url_match():
    result = match_youtube(QUERY_URL)
    assert result.match is True
    assert result.domain == "youtube"
    assert result.file == "abcdef-22-vid.flv"
    assert (result.range_min, result.range_max, result.total_file_size) == (0, 1000, 5000)
    assert result.exist_range is True


def test_itag_34_is_not_part_of_key():
    result = match_youtube("http://h.youtube.com/videoplayback?id=abc&itag=34")
    assert result.match is True
    assert result.file.startswith("abc")
    assert "34" not in result.file


def test_cm2_without_range_is_rejected():
    assert video_from_query("http://h/videoplayback?id=abc&cm2=0").file == ""


def test_clen_inside_range_is_rejected():
    url = "http://h.youtube.com/videoplayback?id=abc&range=0-1000&clen=500"
    assert match_youtube(url).match is False


@pytest.mark.parametrize("begin, expected", [("5", False), ("0", True)])
def test_begin_parameter(begin, expected):
    url = f"http://h.youtube.com/videoplayback?id=abc&begin={begin}"
    assert match_youtube(url).match is expected


def test_overlong_id_is_rejected():
    url = "http://h.youtube.com/videoplayback?id=" + "a" * 41
    assert match_youtube(url).match is False


def test_watchid_wins_over_later_id():
    result = match_youtube("http://h.youtube.com/videoplayback?watchid=wid&id=other")
    assert result.file.startswith("wid")
    assert "other" not in result.file


def test_path_url_match():
    result = match_youtube(PATH_URL)
    assert result.match is True
    assert result.file == "0123456789abcdef-18-vid.flv"
    assert (result.range_min, result.range_max, result.total_file_size) == (0, 999, 9000)


def test_path_url_without_query_is_rejected():
    assert video_from_path(PATH_URL.split("?")[0]).file == ""


def test_path_url_with_cmd2_is_rejected():
    assert match_youtube(PATH_URL.replace("/clen/", "/cmd2/0/clen/")).match is False


def test_watch_page_records_id_without_matching():
    result = match_youtube("http://www.youtube.com/watch?v=dQw")
    assert (result.match, result.domain, result.file) == (False, "youtube_IDs", "dQw")


def test_watch_id_finds_v_among_parameters():
    assert watch_id("http://www.youtube.com/watch?feature=x&v=abc") == "abc"


def test_ytimg_high_quality():
    result = match_ytimg("http://i.ytimg.com/vi/VIDID/hqdefault.jpg")
    assert result.match is True
    assert result.domain == "ytimg"
    assert result.file == "VIDID-hq.jpg"


def test_ytimg_medium_quality():
    result = match_ytimg("http://i.ytimg.com/vi/VIDID/mqdefault.jpg")
    assert result.file.startswith("VIDID")
    assert result.file.endswith("-mq.jpg")


def test_ytimg_storyboard_uses_signature():
    result = match_ytimg("http://i.ytimg.com/sb/VIDID/storyboard3_L1/M2.jpg?sigh=AbC_d-1")
    assert result.match is True
    assert result.file.startswith("AbC_d-1-")
    assert result.file.endswith(".jpg")


def test_ytimg_plain_default_is_rejected():
    result = match_ytimg("http://i.ytimg.com/vi/VIDID/default.jpg")
    assert (result.match, result.file) == (False, "")


def test_ytimg_short_url_raises():
    with pytest.raises(ValueError):
        match_ytimg("x")