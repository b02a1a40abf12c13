"""ASGI handler — translates ASGI scope/messages to dirserve types.

The only component that touches raw ASGI directly. Converts the scope
to a typed Request, runs it through the ranked handler chain, maps
errors to responses, and sends the result back through ASGI send().
"""

import logging
from collections.abc import Sequence

from dirserve._internal.asgi import Receive, Scope, Send
from dirserve.errors import HTTPError, NotFound
from dirserve.http.request import Request
from dirserve.http.response import Response
from dirserve.middleware.protocol import Middleware, Next
from dirserve.server.sender import send_response

logger = logging.getLogger("dirserve.server")


async def _not_found(request: Request) -> Response:
    raise NotFound()


def build_chain(handlers: Sequence[Middleware]) -> Next:
    """Wrap *handlers* so each one's ``next`` is the following handler.

    The innermost ``next`` raises ``NotFound``: a request every handler
    forwarded is a 404.
    """
    chain: Next = _not_found
    for handler in reversed(handlers):
        outer = chain

        async def make_next(req: Request, _handler: Middleware = handler, _next: Next = outer) -> Response:
            return await _handler(req, _next)

        chain = make_next
    return chain


def error_response(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a plain response."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)
    resp = Response(body=exc.detail or f"Error {exc.status}", content_type="text/plain; charset=utf-8")
    resp = resp.with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def _server_error() -> Response:
    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    )


async def handle_request(scope: Scope, receive: Receive, send: Send, *, chain: Next) -> None:
    """Process a single HTTP request through the handler chain."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await chain(request)
    except HTTPError as exc:
        response = error_response(exc, request)
    except Exception:
        logger.exception("500 %s %s", request.method, request.path)
        response = _server_error()

    try:
        await send_response(response, send, method=request.method)
    except UnicodeEncodeError:
        logger.exception("500 %s %s: response could not be encoded", request.method, request.path)
        await send_response(_server_error(), send, method=request.method)
