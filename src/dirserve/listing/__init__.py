"""Listing core — path resolution, dispatch, and directory ordering.

    resolver   -- request segments to a validated path under the root
    dispatcher -- ordered rules picking one Outcome per request
    lister     -- directory entries, directories first, by name
    server     -- ListingFileServer, the pipeline handler wrapping all three
"""

from dirserve.listing.dispatcher import (
    Forward,
    NotFound,
    Outcome,
    Redirect,
    RenderListing,
    ServeFile,
    handle,
    serve,
)
from dirserve.listing.lister import DirectoryEntry, list_directory
from dirserve.listing.resolver import RequestPath, ResolvedTarget, TargetKind, resolve

__all__ = [
    "DirectoryEntry",
    "Forward",
    "NotFound",
    "Outcome",
    "Redirect",
    "RenderListing",
    "RequestPath",
    "ResolvedTarget",
    "ServeFile",
    "TargetKind",
    "handle",
    "list_directory",
    "resolve",
    "serve",
]
