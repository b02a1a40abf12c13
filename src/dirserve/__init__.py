"""dirserve — static files with browsable directory listings.

Maps request paths onto a root directory. Files are served as-is;
directories get an index file or a generated listing, directories
first. Anything outside the root is never reached.

Basic usage::

    from dirserve import App, ListingFileServer, Options

    app = App()
    app.mount(ListingFileServer("./public", options=Options.INDEX))

Any ASGI server can then run ``app``.
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "DirServeError",
    "DirectoryUnreadable",
    "HTTPError",
    "ListingFileServer",
    "NotFound",
    "Options",
    "Request",
    "Response",
    "ServerConfig",
    "Template",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import dirserve`` fast while providing a clean top-level API.
    """
    if name == "App":
        from dirserve.app import App

        return App

    if name in ("Options", "ServerConfig"):
        from dirserve import config as _config

        return getattr(_config, name)

    if name == "ListingFileServer":
        from dirserve.listing.server import ListingFileServer

        return ListingFileServer

    if name == "Request":
        from dirserve.http.request import Request

        return Request

    if name == "Response":
        from dirserve.http.response import Response

        return Response

    if name == "Template":
        from dirserve.templating.returns import Template

        return Template

    if name in ("ConfigurationError", "DirServeError", "DirectoryUnreadable", "HTTPError", "NotFound"):
        from dirserve import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
