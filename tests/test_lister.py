"""Tests for dirserve.listing.lister — directories first, then by name."""

import os
import sys

import pytest

from dirserve.errors import DirectoryUnreadable
from dirserve.listing.lister import DirectoryEntry, list_directory


def names(entries: list[DirectoryEntry]) -> list[str]:
    return [entry.display_name for entry in entries]


class TestDirectoryEntry:
    def test_directory_display_name(self) -> None:
        assert DirectoryEntry("docs", True).display_name == "docs/"

    def test_file_display_name(self) -> None:
        assert DirectoryEntry("a.txt", False).display_name == "a.txt"

    def test_sort_key_puts_directories_first(self) -> None:
        assert DirectoryEntry("z", True).sort_key < DirectoryEntry("a", False).sort_key


class TestOrdering:
    def test_directories_then_files(self, tmp_path) -> None:
        (tmp_path / "B").mkdir()
        (tmp_path / "A").write_text("a")
        (tmp_path / "C").mkdir()

        assert names(list_directory(tmp_path)) == ["B/", "C/", "A"]

    def test_each_group_sorted(self, tmp_path) -> None:
        for name in ("zeta", "alpha", "mid"):
            (tmp_path / name).mkdir()
        for name in ("y.txt", "b.txt", "m.txt"):
            (tmp_path / name).write_text(name)

        assert names(list_directory(tmp_path)) == [
            "alpha/",
            "mid/",
            "zeta/",
            "b.txt",
            "m.txt",
            "y.txt",
        ]

    def test_case_sensitive_code_point_order(self, tmp_path) -> None:
        for name in ("b", "B", "a", "A"):
            (tmp_path / f"{name}.txt").write_text(name)
        if len(os.listdir(tmp_path)) < 4:
            pytest.skip("case-insensitive filesystem")

        assert names(list_directory(tmp_path)) == ["A.txt", "B.txt", "a.txt", "b.txt"]

    def test_directory_names_compared_without_slash(self, tmp_path) -> None:
        (tmp_path / "a").mkdir()
        (tmp_path / "a-b").mkdir()

        assert names(list_directory(tmp_path)) == ["a/", "a-b/"]

    def test_dotfiles_listed(self, tmp_path) -> None:
        (tmp_path / ".hidden").write_text("x")
        (tmp_path / "shown").write_text("x")

        assert names(list_directory(tmp_path)) == [".hidden", "shown"]

    def test_empty_directory(self, tmp_path) -> None:
        assert list_directory(tmp_path) == []

    def test_idempotent(self, tmp_path) -> None:
        for i in range(20):
            (tmp_path / f"dir{i}").mkdir()
            (tmp_path / f"file{i}.txt").write_text(str(i))

        assert list_directory(tmp_path) == list_directory(tmp_path)


class TestSymlinks:
    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_link_to_directory_is_directory(self, tmp_path) -> None:
        (tmp_path / "real").mkdir()
        (tmp_path / "link").symlink_to(tmp_path / "real")

        assert names(list_directory(tmp_path)) == ["link/", "real/"]

    @pytest.mark.skipif(sys.platform == "win32", reason="symlinks need privileges")
    def test_broken_link_skipped(self, tmp_path) -> None:
        (tmp_path / "kept.txt").write_text("x")
        (tmp_path / "dangling").symlink_to(tmp_path / "gone")

        assert names(list_directory(tmp_path)) == ["kept.txt"]


class TestFailures:
    def test_missing_directory(self, tmp_path) -> None:
        with pytest.raises(DirectoryUnreadable) as info:
            list_directory(tmp_path / "vanished")
        assert info.value.path == tmp_path / "vanished"

    def test_file_is_not_listable(self, tmp_path) -> None:
        afile = tmp_path / "a.txt"
        afile.write_text("x")

        with pytest.raises(DirectoryUnreadable):
            list_directory(afile)

    @pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root ignores permissions")
    def test_unreadable_directory(self, tmp_path) -> None:
        locked = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0o000)
        try:
            with pytest.raises(DirectoryUnreadable):
                list_directory(locked)
        finally:
            locked.chmod(0o755)

    def test_entry_vanishing_mid_listing_skipped(self, tmp_path, monkeypatch) -> None:
        (tmp_path / "stays.txt").write_text("x")
        (tmp_path / "goes.txt").write_text("x")

        real_stat = os.stat

        def flaky_stat(path, *args, **kwargs):
            if os.fspath(path).endswith("goes.txt"):
                raise FileNotFoundError(path)
            return real_stat(path, *args, **kwargs)

        monkeypatch.setattr("dirserve.listing.lister.os.stat", flaky_stat)

        assert names(list_directory(tmp_path)) == ["stays.txt"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem that stores raw name bytes")
    def test_undecodable_name_skipped(self, tmp_path) -> None:
        (tmp_path / "good.txt").write_text("x")
        (tmp_path / os.fsdecode(b"bad\xff.txt")).write_text("x")

        assert names(list_directory(tmp_path)) == ["good.txt"]
