"""Request dispatch — pick exactly one outcome for a resolved request.

The decision is an ordered rule table (``RULES``); the first rule whose
predicate holds wins. ``decide()`` evaluates the table over plain
``Facts`` and performs no I/O, so precedence can be tested on its own.
``handle()`` gathers the facts from the filesystem and carries out the
chosen action.

Precedence, highest first::

    no match                          -> Forward
    directory, NORMALIZE_DIRS, no "/" -> Redirect to ".../"
    directory, INDEX, index.html      -> ServeFile(index.html)
    directory                         -> RenderListing
    regular file                      -> ServeFile
    anything else                     -> Forward
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dirserve.config import Options, ServerConfig
from dirserve.listing.lister import list_directory
from dirserve.listing.resolver import RequestPath, ResolvedTarget, TargetKind, resolve
from dirserve.templating.returns import RenderedBody

INDEX_FILE = "index.html"


# -- Outcomes --


@dataclass(frozen=True, slots=True)
class Redirect:
    """Permanently redirect to ``location``."""

    location: str
    status: int = 308


@dataclass(frozen=True, slots=True)
class ServeFile:
    """Serve the regular file at ``path`` (already validated)."""

    path: Path


@dataclass(frozen=True, slots=True)
class RenderListing:
    """Send a rendered directory listing."""

    body: RenderedBody


@dataclass(frozen=True, slots=True)
class Forward:
    """Decline; let the next handler try the request."""


@dataclass(frozen=True, slots=True)
class NotFound:
    """Answer 404 without consulting any other handler."""


type Outcome = Redirect | ServeFile | RenderListing | Forward | NotFound


# -- Decision table --


class Action(Enum):
    FORWARD = "forward"
    REDIRECT = "redirect"
    SERVE_INDEX = "serve_index"
    RENDER_LISTING = "render_listing"
    SERVE_FILE = "serve_file"


def _never() -> bool:
    return False


@dataclass(frozen=True, slots=True)
class Facts:
    """Everything the rule table looks at for one request.

    ``index_available`` is a callable so the index file is only probed
    when the index rule is actually reached.
    """

    kind: TargetKind | None
    has_trailing_slash: bool = False
    normalize_dirs: bool = False
    index_enabled: bool = False
    index_available: Callable[[], bool] = _never

    @property
    def is_dir(self) -> bool:
        return self.kind is TargetKind.DIRECTORY


@dataclass(frozen=True, slots=True)
class Rule:
    name: str
    applies: Callable[[Facts], bool]
    action: Action


RULES: tuple[Rule, ...] = (
    Rule("no-match", lambda f: f.kind is None, Action.FORWARD),
    Rule(
        "normalize-dir",
        lambda f: f.is_dir and f.normalize_dirs and not f.has_trailing_slash,
        Action.REDIRECT,
    ),
    Rule(
        "index-file",
        lambda f: f.is_dir and f.index_enabled and f.index_available(),
        Action.SERVE_INDEX,
    ),
    Rule("listing", lambda f: f.is_dir, Action.RENDER_LISTING),
    Rule("file", lambda f: f.kind is TargetKind.FILE, Action.SERVE_FILE),
)


def decide(facts: Facts, rules: tuple[Rule, ...] = RULES) -> Action:
    """Return the action of the first rule that applies, else ``FORWARD``."""
    for rule in rules:
        if rule.applies(facts):
            return rule.action
    return Action.FORWARD


# -- Execution --


def directory_label(parts: tuple[str, ...]) -> str:
    """Label for a listing below the mount point, bracketed by ``/``."""
    if not parts:
        return "/"
    return "/" + "/".join(part.replace("\\", "/") for part in parts) + "/"


def _index_openable(path: Path) -> bool:
    if not path.is_file():
        return False
    try:
        with path.open("rb"):
            pass
    except OSError:
        return False
    return True


def gather_facts(config: ServerConfig, request_path: RequestPath, resolved: ResolvedTarget | None) -> Facts:
    if resolved is None:
        return Facts(kind=None)
    return Facts(
        kind=resolved.kind,
        has_trailing_slash=request_path.has_trailing_slash,
        normalize_dirs=Options.NORMALIZE_DIRS in config.options,
        index_enabled=Options.INDEX in config.options,
        index_available=lambda: _index_openable(resolved.path / INDEX_FILE),
    )


def handle(config: ServerConfig, request_path: RequestPath, resolved: ResolvedTarget | None) -> Outcome:
    """Choose and carry out the outcome for one request.

    Raises ``DirectoryUnreadable`` when a listing is due but the
    directory can't be enumerated.
    """
    action = decide(gather_facts(config, request_path, resolved))
    if resolved is None:
        return Forward()

    match action:
        case Action.REDIRECT:
            return Redirect(request_path.with_trailing_slash())
        case Action.SERVE_INDEX:
            return ServeFile(resolved.path / INDEX_FILE)
        case Action.RENDER_LISTING:
            entries = list_directory(resolved.path)
            label = request_path.prefix + directory_label(resolved.parts)
            return RenderListing(config.renderer(label, [entry.display_name for entry in entries]))
        case Action.SERVE_FILE:
            return ServeFile(resolved.path)
    return Forward()


def serve(config: ServerConfig, request_path: RequestPath) -> Outcome:
    """Resolve ``request_path`` under the configured root and dispatch it."""
    resolved = resolve(config.root, request_path.segments, config.allow_dotfiles)
    return handle(config, request_path, resolved)
