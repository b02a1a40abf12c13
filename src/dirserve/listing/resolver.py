"""Path resolution — request segments to a validated, rooted path.

Every segment is checked before anything is joined onto the root, so a
resolved path can never escape it. A rejected request is not an error:
``resolve()`` returns ``None`` and the dispatcher forwards the request
to the next handler.
"""

from __future__ import annotations

import stat
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePath
from urllib.parse import quote, unquote

# Characters that would split a segment into several path components
_SEPARATORS = frozenset("/\\\x00")

# Segment suffixes reserved for route syntax and drive specifiers
_BAD_ENDINGS = (":", "<", ">")

# Already-escaped or reserved URL characters left alone when re-quoting a path
_URL_SAFE = "/%:@!$&'()*+,;=-._~"


class TargetKind(Enum):
    """What a resolved path denoted when it was probed."""

    DIRECTORY = "directory"
    FILE = "file"
    ABSENT = "absent"


@dataclass(frozen=True, slots=True)
class RequestPath:
    """The request path as the client sees it, plus its decoded segments.

    ``url_path`` is the path from the location bar (percent-escapes kept,
    raw non-ASCII left as sent) and is what redirects are built from.
    ``prefix`` is the mount point it was matched under; ``segments`` are
    the decoded components relative to it.
    """

    url_path: str
    segments: tuple[str, ...] = ()
    query: str = ""
    prefix: str = ""

    @classmethod
    def from_url(cls, url_path: str, *, prefix: str = "", query: str = "") -> RequestPath:
        """Split and decode a raw URL path below ``prefix``.

        Splitting happens before decoding, so an encoded ``%2F`` stays
        inside its segment and is rejected later by ``resolve()``.
        """
        relative = url_path[len(prefix) :] if prefix else url_path
        segments = tuple(unquote(part, errors="surrogateescape") for part in relative.split("/") if part)
        return cls(url_path=url_path or "/", segments=segments, query=query, prefix=prefix)

    @property
    def has_trailing_slash(self) -> bool:
        return self.url_path.endswith("/")

    def with_trailing_slash(self) -> str:
        """The same location with exactly one trailing ``/`` and the query kept.

        Raw non-ASCII is percent-encoded so the result is a valid header value.
        """
        path = self.url_path if self.has_trailing_slash else f"{self.url_path}/"
        path = quote(path, safe=_URL_SAFE, errors="surrogateescape")
        if self.query:
            return f"{path}?{self.query}"
        return path


@dataclass(frozen=True, slots=True)
class ResolvedTarget:
    """A path under the root and its kind at the moment it was probed.

    Created for one request and dropped after it; never cached.
    """

    path: Path
    kind: TargetKind
    parts: tuple[str, ...] = ()

    @property
    def is_dir(self) -> bool:
        return self.kind is TargetKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self.kind is TargetKind.FILE


def validate_segments(raw_segments: Iterable[str], allow_dotfiles: bool) -> tuple[str, ...] | None:
    """Return the segments safe to join onto a root, or ``None`` to reject.

    Empty segments are dropped. ``..`` is always rejected, never popped.
    A lone ``.`` is dropped when dotfiles are allowed and rejected
    otherwise, like every other segment starting with a dot.
    """
    parts: list[str] = []
    for segment in raw_segments:
        if not segment:
            continue
        if segment == "..":
            return None
        if segment.startswith("."):
            if not allow_dotfiles:
                return None
            if segment == ".":
                continue
        if _SEPARATORS.intersection(segment):
            return None
        if segment.startswith("*") or segment.endswith(_BAD_ENDINGS):
            return None
        if PurePath(segment).anchor:
            return None
        parts.append(segment)
    return tuple(parts)


def probe(path: Path) -> TargetKind:
    """Classify ``path`` with a single point-in-time ``stat``."""
    try:
        mode = path.stat().st_mode
    except (OSError, ValueError):
        return TargetKind.ABSENT
    if stat.S_ISDIR(mode):
        return TargetKind.DIRECTORY
    if stat.S_ISREG(mode):
        return TargetKind.FILE
    return TargetKind.ABSENT


def resolve(root: Path, raw_segments: Iterable[str], allow_dotfiles: bool) -> ResolvedTarget | None:
    """Join validated segments onto ``root`` and probe the result.

    Returns ``None`` when any segment is rejected. Performs no writes.
    """
    parts = validate_segments(raw_segments, allow_dotfiles)
    if parts is None:
        return None

    path = root.joinpath(*parts)
    if not path.is_relative_to(root):
        return None

    return ResolvedTarget(path=path, kind=probe(path), parts=parts)
