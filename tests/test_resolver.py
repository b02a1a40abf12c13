"""Tests for dirserve.listing.resolver — rooted, traversal-proof paths."""

import pytest

from dirserve.listing.resolver import (
    RequestPath,
    TargetKind,
    probe,
    resolve,
    validate_segments,
)


@pytest.fixture
def root(tmp_path):
    """A small tree: docs/ (with a file), a file, and a dotfile."""
    site = tmp_path / "site"
    site.mkdir()
    (site / "docs").mkdir()
    (site / "docs" / "guide.txt").write_text("guide")
    (site / "readme.txt").write_text("readme")
    (site / ".env").write_text("SECRET=1")
    (tmp_path / "outside.txt").write_text("outside")
    return site


class TestRequestPath:
    def test_root(self) -> None:
        rp = RequestPath.from_url("/")
        assert rp.segments == ()
        assert rp.has_trailing_slash

    def test_empty_path_is_root(self) -> None:
        rp = RequestPath.from_url("")
        assert rp.url_path == "/"
        assert rp.segments == ()

    def test_segments_decoded(self) -> None:
        rp = RequestPath.from_url("/my%20docs/a%2Bb.txt")
        assert rp.segments == ("my docs", "a+b.txt")

    def test_encoded_slash_stays_in_segment(self) -> None:
        rp = RequestPath.from_url("/a%2Fb")
        assert rp.segments == ("a/b",)

    def test_empty_segments_dropped(self) -> None:
        assert RequestPath.from_url("//docs///guide.txt").segments == ("docs", "guide.txt")

    def test_prefix_stripped(self) -> None:
        rp = RequestPath.from_url("/files/docs/", prefix="/files")
        assert rp.segments == ("docs",)
        assert rp.url_path == "/files/docs/"
        assert rp.prefix == "/files"

    def test_raw_non_ascii_segment(self) -> None:
        assert RequestPath.from_url("/café/naïve.txt").segments == ("café", "naïve.txt")

    def test_with_trailing_slash(self) -> None:
        assert RequestPath.from_url("/docs").with_trailing_slash() == "/docs/"

    def test_with_trailing_slash_no_duplicate(self) -> None:
        assert RequestPath.from_url("/docs/").with_trailing_slash() == "/docs/"

    def test_with_trailing_slash_keeps_query(self) -> None:
        rp = RequestPath.from_url("/docs", query="sort=name")
        assert rp.with_trailing_slash() == "/docs/?sort=name"

    def test_with_trailing_slash_quotes_non_ascii(self) -> None:
        assert RequestPath.from_url("/café").with_trailing_slash() == "/caf%C3%A9/"

    def test_with_trailing_slash_keeps_escapes(self) -> None:
        assert RequestPath.from_url("/my%20docs").with_trailing_slash() == "/my%20docs/"


class TestValidateSegments:
    def test_plain(self) -> None:
        assert validate_segments(["a", "b.txt"], False) == ("a", "b.txt")

    @pytest.mark.parametrize("allow_dotfiles", [False, True])
    def test_parent_always_rejected(self, allow_dotfiles) -> None:
        assert validate_segments(["docs", "..", "x"], allow_dotfiles) is None

    def test_dotfile_rejected_by_default(self) -> None:
        assert validate_segments([".env"], False) is None

    def test_dotfile_allowed(self) -> None:
        assert validate_segments([".env"], True) == (".env",)

    def test_current_dir_rejected_without_dotfiles(self) -> None:
        assert validate_segments(["docs", "."], False) is None

    def test_current_dir_dropped_with_dotfiles(self) -> None:
        assert validate_segments(["docs", ".", "guide.txt"], True) == ("docs", "guide.txt")

    @pytest.mark.parametrize(
        "segment",
        ["a/b", "a\\b", "nul\x00", "*glob", "drive:", "path>", "path<"],
    )
    def test_unsafe_segments(self, segment) -> None:
        assert validate_segments([segment], True) is None

    def test_empty_is_root(self) -> None:
        assert validate_segments([], False) == ()


class TestResolve:
    def test_root_is_directory(self, root) -> None:
        target = resolve(root, [], False)
        assert target is not None
        assert target.path == root
        assert target.kind is TargetKind.DIRECTORY
        assert target.parts == ()

    def test_directory(self, root) -> None:
        target = resolve(root, ["docs"], False)
        assert target is not None
        assert target.is_dir
        assert target.path == root / "docs"

    def test_file(self, root) -> None:
        target = resolve(root, ["docs", "guide.txt"], False)
        assert target is not None
        assert target.is_file
        assert target.path == root / "docs" / "guide.txt"

    def test_absent(self, root) -> None:
        target = resolve(root, ["missing.txt"], False)
        assert target is not None
        assert target.kind is TargetKind.ABSENT

    @pytest.mark.parametrize("allow_dotfiles", [False, True])
    @pytest.mark.parametrize(
        "segments",
        [
            [".."],
            ["..", "outside.txt"],
            ["docs", "..", "..", "outside.txt"],
            ["docs", "..", "..", "etc", "passwd"],
        ],
    )
    def test_traversal_is_no_match(self, root, segments, allow_dotfiles) -> None:
        assert resolve(root, segments, allow_dotfiles) is None

    def test_absolute_segment_is_no_match(self, root) -> None:
        assert resolve(root, ["/etc/passwd"], True) is None

    def test_dotfile_hidden(self, root) -> None:
        assert resolve(root, [".env"], False) is None

    def test_dotfile_visible(self, root) -> None:
        target = resolve(root, [".env"], True)
        assert target is not None
        assert target.is_file

    def test_result_stays_under_root(self, root) -> None:
        target = resolve(root, ["docs", ".", "guide.txt"], True)
        assert target is not None
        assert target.path.is_relative_to(root)


class TestProbe:
    def test_kinds(self, root) -> None:
        assert probe(root) is TargetKind.DIRECTORY
        assert probe(root / "readme.txt") is TargetKind.FILE
        assert probe(root / "missing") is TargetKind.ABSENT

    def test_path_through_file_is_absent(self, root) -> None:
        assert probe(root / "readme.txt" / "child") is TargetKind.ABSENT
