"""dirserve exception hierarchy.

Shared by the resolver, dispatcher, lister, and host handler so every
module raises and catches the same types.

Requests that simply don't map to anything servable are not errors:
the resolver returns ``None`` and the dispatcher answers ``Forward``.
"""

from dataclasses import dataclass
from pathlib import Path


class DirServeError(Exception):
    """Base for all dirserve-specific errors."""


class ConfigurationError(DirServeError):
    """Raised when server configuration is invalid.

    Fatal: raised while building ``ServerConfig`` so startup aborts
    before any request is handled.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(DirServeError):
    """An error that maps directly to an HTTP status code.

    Raised by the dispatcher or the host pipeline. The ASGI handler
    catches these and turns them into a plain response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no handler answered the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class DirectoryUnreadable(HTTPError):  # noqa: N818 — describes the condition
    """500 — a directory passed every check but could not be enumerated.

    The directory's existence was already confirmed, so this is never
    reported as a miss. The filesystem path stays on ``path`` for logs;
    the client only sees a generic detail.
    """

    def __init__(self, path: Path, detail: str = "Directory could not be read") -> None:
        super().__init__(status=500, detail=detail)
        object.__setattr__(self, "path", path)
