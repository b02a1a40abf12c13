"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation, safe to
share across concurrent requests, no string-key dict lookups.
"""

import logging
from dataclasses import dataclass, field
from enum import Flag, auto
from pathlib import Path

from dirserve.errors import ConfigurationError
from dirserve.templating.returns import Renderer, listing_template

logger = logging.getLogger("dirserve.config")

# Rank given to listing routes unless overridden. Lower ranks run first.
DEFAULT_RANK = 10


class Options(Flag):
    """Independent toggles for a listing file server.

    Combine with ``|``::

        Options.INDEX | Options.NORMALIZE_DIRS
    """

    NONE = 0
    # Allow path segments beginning with "."
    DOTFILES = auto()
    # Serve index.html before falling back to a generated listing
    INDEX = auto()
    # Redirect "/docs" to "/docs/" when it names a directory
    NORMALIZE_DIRS = auto()


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Configuration for one listing file server. Immutable after creation.

    ``root`` must name an existing directory; anything else raises
    ``ConfigurationError`` immediately so a misconfigured server never
    starts taking requests::

        config = ServerConfig("./public", options=Options.INDEX)

    ``options`` defaults to ``Options.NONE``: unlike a plain static file
    server, a directory listing is the expected behaviour, so the index
    lookup is opt-in.
    """

    root: Path
    options: Options = Options.NONE
    rank: int = DEFAULT_RANK
    renderer: Renderer = field(default=listing_template)

    def __post_init__(self) -> None:
        root = Path(self.root)
        if not root.is_dir():
            logger.error("ListingFileServer path '%s' is not a directory.", root)
            logger.warning("Aborting early to prevent inevitable handler failure.")
            msg = f"bad ListingFileServer path {str(root)!r}: refusing to continue"
            raise ConfigurationError(msg)
        object.__setattr__(self, "root", root.resolve())

    @property
    def allow_dotfiles(self) -> bool:
        return Options.DOTFILES in self.options
