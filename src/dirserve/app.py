"""dirserve application class.

Mutable during setup (mounting handlers, registering routes).
Frozen at runtime when ``__call__()`` is first invoked: the handlers are
ordered by rank once and the resulting chain is shared by all requests.
"""

import inspect
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from dirserve._internal.asgi import Receive, Scope, Send
from dirserve.config import DEFAULT_RANK
from dirserve.http.request import Request
from dirserve.http.response import Response
from dirserve.middleware.protocol import Middleware, Next
from dirserve.server.handler import build_chain, handle_request

logger = logging.getLogger("dirserve.server")

# Plain routes outrank listing servers unless told otherwise
ROUTE_RANK = 0


@dataclass(frozen=True, slots=True)
class _Mounted:
    rank: int
    order: int
    handler: Middleware


class _Route:
    """Exact-path GET route wrapped as a pipeline handler."""

    __slots__ = ("func", "path")

    def __init__(self, path: str, func: Callable[..., Any]) -> None:
        self.path = path
        self.func = func

    async def __call__(self, request: Request, next: Next) -> Response:
        if request.method not in ("GET", "HEAD") or request.path != self.path:
            return await next(request)
        result = self.func(request) if inspect.signature(self.func).parameters else self.func()
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, Response):
            return result
        return Response(body=result)


class App:
    """A ranked chain of handlers served over ASGI.

    Handlers run lowest rank first; equal ranks keep registration order.
    Each handler either answers or calls ``next`` to forward. A request
    nobody answers gets a 404::

        app = App()
        app.mount(ListingFileServer("./public", options=Options.INDEX))

        @app.route("/health")
        def health():
            return "ok"
    """

    __slots__ = ("_chain", "_freeze_lock", "_frozen", "_mounted")

    def __init__(self) -> None:
        self._mounted: list[_Mounted] = []
        self._chain: Next | None = None
        self._frozen = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Registration --

    def mount(self, handler: Middleware, *, rank: int | None = None) -> None:
        """Add a handler to the chain.

        Without an explicit ``rank``, the handler's own ``rank``
        attribute is used, falling back to the default listing rank.
        """
        self._check_not_frozen()
        if rank is None:
            rank = getattr(handler, "rank", DEFAULT_RANK)
        self._mounted.append(_Mounted(rank, len(self._mounted), handler))
        logger.debug("Mounted %s at rank %d", getattr(handler, "name", handler), rank)

    def route(self, path: str, *, rank: int = ROUTE_RANK) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register an exact-path GET route via decorator.

        The function may take the request or nothing, and may return a
        ``Response`` or a body.
        """

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.mount(_Route(path, func), rank=rank)
            return func

        return decorator

    @property
    def handlers(self) -> tuple[Middleware, ...]:
        """Mounted handlers in the order they will run."""
        ordered = sorted(self._mounted, key=lambda m: (m.rank, m.order))
        return tuple(m.handler for m in ordered)

    # -- ASGI --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._chain is not None

        await handle_request(scope, receive, send, chain=self._chain)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Freeze at startup, then acknowledge lifespan messages."""
        self._ensure_frozen()

        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Freeze --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._chain = build_chain(self.handlers)
            self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Mount handlers and register routes before the first request."
            )
            raise RuntimeError(msg)
