"""Handler protocol and Next type alias.

A handler in the pipeline is any callable matching::

    async def my_handler(request: Request, next: Next) -> Response: ...

No base class required. The app checks the shape, not the lineage.
Calling ``next`` forwards the request to the following handler; the
last ``next`` raises ``NotFound``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from dirserve.http.request import Request
from dirserve.http.response import Response

# The next handler in the chain
type Next = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for pipeline handlers.

    Accepts both functions and callable objects::

        # Function handler
        async def health(request: Request, next: Next) -> Response:
            if request.path == "/health":
                return Response("ok")
            return await next(request)

        # Class handler, optionally ranked
        class Listing:
            rank = 10

            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
