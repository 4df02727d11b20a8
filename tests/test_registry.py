import pytest

from haarp.plugins import downloads, registry, youtube


def test_get_plugin_by_name():
    assert registry.get_plugin("youtube.com") is youtube.match_youtube


def test_get_plugin_accepts_library_path():
    assert registry.get_plugin("./ziddu.com.so") is downloads.match_ziddu


def test_unknown_plugin_raises():
    with pytest.raises(KeyError):
        registry.get_plugin("nosuch.example.com")


def test_plugin_names_sorted_and_complete():
    names = registry.plugin_names()
    assert names == sorted(names)
    assert "youtube.com" in names
    assert "steampowered.com" in names
    assert len(names) == len(set(names))


def test_every_listed_name_resolves_same_as_library_path():
    for name in registry.plugin_names():
        assert registry.get_plugin(name) is registry.get_plugin(f"./{name}.so")


def test_run_plugin_returns_match():
    result = registry.run_plugin(
        "ziddu.com", "http://downloads.ziddu.com/downloadfiles/123/song.mp3"
    )
    assert result.match is True
    assert result.domain == "ziddu"
    assert result.file == "song.mp3"


def test_stateful_plugin_keeps_domain_between_calls():
    first = registry.run_plugin(
        "socialpointgames.com", "http://x.socialpointgames.com/dragoncity/a.png"
    )
    second = registry.run_plugin(
        "socialpointgames.com", "http://x.socialpointgames.com/other/b.png"
    )
    assert first.domain == "socialpg_dragoncity"
    assert second.domain == "socialpg_dragoncity"
    assert second.file == "b.png"


def test_main_prints_result(capsys):
    code = registry.main(
        ["ziddu.com.so", "http://downloads.ziddu.com/downloadfiles/123/song.mp3"]
    )
    out = capsys.readouterr().out
    assert code == 0
    assert "Match: 1" in out
    assert "Domain: ziddu" in out
    assert "File: song.mp3" in out
    assert "Time: " in out


def test_main_unknown_plugin_fails(capsys):
    code = registry.main(["nosuch.so", "http://example.com/"])
    assert code == 1
    assert "nosuch" in capsys.readouterr().err


def test_main_plugin_error_fails(capsys):
    code = registry.main(["speedtest.net", "x"])
    assert code == 1
    assert "Plugin failed" in capsys.readouterr().err