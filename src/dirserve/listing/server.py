"""Listing file server — static files plus generated directory listings.

A drop-in replacement for a plain static file handler that renders a
browsable listing when a directory is requested instead of failing.

Be careful using this in production: a listing exposes file names and
directory structure that would otherwise stay hidden.

Falls through to the next handler for anything it can't serve.
"""

from __future__ import annotations

import copy
import logging
import mimetypes
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from anyio import to_thread
from kida import Environment

from dirserve import errors
from dirserve.config import DEFAULT_RANK, Options, ServerConfig
from dirserve.errors import DirectoryUnreadable
from dirserve.http.request import Request
from dirserve.http.response import Response
from dirserve.listing.dispatcher import (
    Forward,
    NotFound,
    Outcome,
    Redirect,
    RenderListing,
    ServeFile,
    serve,
)
from dirserve.listing.resolver import RequestPath
from dirserve.middleware.protocol import Next
from dirserve.templating.integration import create_environment, render_template
from dirserve.templating.returns import RenderedBody, Renderer, Template, listing_template

logger = logging.getLogger("dirserve.listing")


class ListingFileServer:
    """Handler that serves files and directory listings under a root.

    Only ``GET`` and ``HEAD`` requests below ``prefix`` are considered;
    everything else goes straight to ``next``.

    Usage::

        # Listing only (no options)
        app.mount(ListingFileServer.from_dir("./public"))

        # Index files first, canonical "/" directory URLs, custom rank
        app.mount(
            ListingFileServer(
                "./public",
                options=Options.INDEX | Options.NORMALIZE_DIRS,
                prefix="/files",
            ).with_rank(5)
        )

    The renderer receives the directory label and the ordered entry
    names, which are meant to be used as relative links.
    """

    __slots__ = ("_cache_control", "_env", "_prefix", "config")

    def __init__(
        self,
        root: str | Path,
        *,
        options: Options = Options.NONE,
        renderer: Renderer = listing_template,
        rank: int = DEFAULT_RANK,
        prefix: str = "/",
        template_dirs: Sequence[str | Path] = (),
        cache_control: str = "public, max-age=3600",
        env: Environment | None = None,
    ) -> None:
        self.config = ServerConfig(Path(root), options=options, rank=rank, renderer=renderer)
        self._env = env if env is not None else create_environment(template_dirs)
        self._cache_control = cache_control

        # Normalize prefix: leading slash, no trailing one. "/" becomes "".
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @classmethod
    def from_dir(cls, root: str | Path, renderer: Renderer = listing_template) -> ListingFileServer:
        """A server for ``root`` with no options enabled."""
        return cls(root, renderer=renderer)

    def with_rank(self, rank: int) -> ListingFileServer:
        """Return a copy of this server with a different rank."""
        clone = copy.copy(self)
        clone.config = replace(self.config, rank=rank)
        return clone

    @property
    def rank(self) -> int:
        return self.config.rank

    @property
    def root(self) -> Path:
        return self.config.root

    @property
    def name(self) -> str:
        return f"ListingFileServer: {self.config.root}/"

    def __repr__(self) -> str:
        return f"<{self.name} rank={self.rank} options={self.config.options!r}>"

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a file, index, listing or redirect, or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        raw_path = request.raw_path
        if self._prefix and not (raw_path == self._prefix or raw_path.startswith(self._prefix + "/")):
            return await next(request)

        request_path = RequestPath.from_url(raw_path, prefix=self._prefix, query=request.query_string)

        try:
            outcome = await to_thread.run_sync(serve, self.config, request_path)
        except DirectoryUnreadable as exc:
            logger.error("%s: cannot read directory %s", self.name, exc.path, exc_info=exc.__cause__)
            raise

        return await self._respond(outcome, request, next)

    async def _respond(self, outcome: Outcome, request: Request, next: Next) -> Response:
        match outcome:
            case Redirect(location=location, status=status):
                return Response(body="", status=status).with_header("Location", location)
            case ServeFile(path=path):
                response = await to_thread.run_sync(self._read_file, path)
                if response is None:
                    logger.debug("%s: %s could not be read", self.name, path)
                    return await next(request)
                return response
            case RenderListing(body=body):
                return self._render(body)
            case NotFound():
                raise errors.NotFound()
            case Forward():
                logger.debug("%s: forwarding %s", self.name, request.path)
        return await next(request)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _read_file(self, file_path: Path) -> Response | None:
        """Read a validated file and build a response, ``None`` if it can't be read."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        try:
            body = file_path.read_bytes()
        except OSError:
            return None

        return (
            Response(body=body, content_type=content_type)
            .with_header("Content-Length", str(len(body)))
            .with_header("Cache-Control", self._cache_control)
        )

    def _render(self, body: RenderedBody) -> Response:
        if isinstance(body, Template):
            return Response(body=render_template(self._env, body))
        return Response(body=body)
