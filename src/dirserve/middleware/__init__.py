"""Pipeline handlers — Protocol-based, no inheritance required.

A handler is any callable matching:
    async def handler(request: Request, next: Next) -> Response

Built-in handlers:
    ListingFileServer -- files and directory listings (dirserve.listing.server)
"""

from dirserve.middleware.protocol import Middleware, Next

__all__ = [
    "Middleware",
    "Next",
]
