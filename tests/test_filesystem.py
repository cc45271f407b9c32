from unittest import mock

import pytest

from soulcast import filesystem
from soulcast.filesystem import File, FileMode


def test_open_missing_file_returns_none(tmp_path):
    assert File.open(tmp_path / "missing.bin", FileMode.OPEN_READ) is None


def test_write_then_read_round_trip(tmp_path):
    target = tmp_path / "data.bin"
    with File.open(target, FileMode.CREATE_WRITE) as handle:
        assert handle.mode() is FileMode.CREATE_WRITE
        assert handle.write(b"hello") == 5
    with File.open(target, FileMode.OPEN_READ) as handle:
        assert handle.length() == 5
        assert handle.read(5) == b"hello"
        assert handle.position() == 5
        assert handle.seek(1) == 1
        assert handle.read(10) == b"ello"


def test_write_only_file_reads_nothing(tmp_path):
    with File.open(tmp_path / "w.bin", FileMode.CREATE_WRITE) as handle:
        handle.write(b"abc")
        handle.seek(0)
        assert handle.read(3) == b""


def test_read_only_file_writes_nothing(tmp_path):
    target = tmp_path / "r.bin"
    target.write_bytes(b"xyz")
    with File.open(target, FileMode.OPEN_READ) as handle:
        assert handle.write(b"abc") == 0
    assert target.read_bytes() == b"xyz"


def test_create_mode_reads_back_what_it_wrote(tmp_path):
    with File.open(tmp_path / "c.bin", FileMode.CREATE) as handle:
        handle.write(b"round")
        handle.seek(0)
        assert handle.read(5) == b"round"


def test_exists_and_destroy(tmp_path):
    target = tmp_path / "f.txt"
    target.write_text("x")
    assert File.exists(target)
    assert File.destroy(target) is True
    assert not File.exists(target)
    assert File.destroy(target) is False


def test_directory_lifecycle(tmp_path):
    nested = tmp_path / "a" / "b"
    assert filesystem.create_directory(nested) is True
    assert filesystem.create_directory(nested) is False
    assert filesystem.directory_exists(nested)
    assert filesystem.delete_directory(tmp_path / "a") is True
    assert not filesystem.directory_exists(nested)
    assert filesystem.delete_directory(tmp_path / "a") is False


def test_enumerate_directory(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "b.txt").write_text("b")
    (tmp_path / "sub" / "c.txt").write_text("c")
    flat = filesystem.enumerate_directory(tmp_path, recursive=False)
    assert sorted(p.rsplit("/", 1)[-1] for p in flat) == ["b.txt", "sub"]
    deep = filesystem.enumerate_directory(tmp_path)
    assert len(deep) == 3
    assert any(p.endswith("sub/c.txt") for p in deep)
    assert all("\\" not in p for p in deep)


def test_enumerate_missing_directory_is_empty(tmp_path):
    assert filesystem.enumerate_directory(tmp_path / "nope") == []


def _explore_commands(platform):
    launched = []

    def fake_popen(args, *rest, **kwargs):
        launched.append(list(args))
        return mock.Mock()

    with mock.patch.object(filesystem.sys, "platform", platform), \
            mock.patch.object(filesystem.subprocess, "Popen", side_effect=fake_popen):
        result = filesystem.explore_directory("some/dir")
    return result, launched


def test_explore_directory_on_linux_uses_xdg_open():
    result, launched = _explore_commands("linux")
    assert result is None
    assert launched == [["xdg-open", "some/dir"]]


def test_explore_directory_elsewhere_uses_open():
    result, launched = _explore_commands("darwin")
    assert result is None
    assert launched == [["open", "some/dir"]]


def test_open_url_delegates_to_browser():
    with mock.patch.object(filesystem.webbrowser, "open", return_value=True) as opener:
        assert filesystem.open_url("https://example.com/") is True
    opener.assert_called_once_with("https://example.com/")


def test_file_name_helpers():
    assert filesystem.get_file_name("dir/file.txt") == "file.txt"
    assert filesystem.get_file_name("dir/sub/") == ""
    assert filesystem.get_path_no_extension("dir/file.txt") == "file"
    assert filesystem.get_file_name_no_extension("dir/archive.tar.gz") == "archive.tar"
    assert filesystem.get_directory_name("dir/sub/file.txt") == "dir/sub"


def test_get_path_after():
    assert filesystem.get_path_after("root/assets/sprites/a.png", "assets") == "/sprites/a.png"
    assert filesystem.get_path_after("root/a.png", "missing") == ""


@pytest.mark.parametrize(
    "raw, expected",
    [("a/./b/../c", "a/c"), ("a\\b", "a/b"), ("", "")],
)
def test_normalize(raw, expected):
    assert filesystem.normalize(raw) == expected


@pytest.mark.parametrize("raw", ["a/./b/../c", "../x/./y", "/p/../q/", "a//b"])
def test_normalize_is_idempotent(raw):
    once = filesystem.normalize(raw)
    assert filesystem.normalize(once) == once


def test_join():
    assert filesystem.join("a", "b", "c") == filesystem.normalize("a/b/c")
    assert filesystem.join("a", "/abs") == "/abs"
    assert filesystem.join("", "x/./y") == filesystem.normalize("x/./y")
    assert filesystem.join("x/./y", "") == filesystem.normalize("x/./y")


def test_join_needs_two_paths():
    with pytest.raises(TypeError):
        filesystem.join("only")