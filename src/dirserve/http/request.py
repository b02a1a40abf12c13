"""Immutable HTTP request.

Frozen metadata only: the listing server never reads a request body.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from dirserve._internal.asgi import Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the decoded path; ``raw_path`` keeps the percent-escapes
    the client sent, which is what segment splitting and redirects must
    work from. Unescaped non-ASCII bytes are read as UTF-8.
    """

    method: str
    path: str
    raw_path: str
    query_string: str = ""
    headers: tuple[tuple[bytes, bytes], ...] = ()

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope) -> Request:
        """Create a Request from an ASGI scope."""
        path = scope["path"]
        raw = scope.get("raw_path")
        raw_path = raw.decode("utf-8", "surrogateescape") if raw else quote(path)
        return cls(
            method=scope["method"],
            path=path,
            raw_path=raw_path,
            query_string=scope.get("query_string", b"").decode("latin-1"),
            headers=tuple(scope.get("headers", ())),
        )
