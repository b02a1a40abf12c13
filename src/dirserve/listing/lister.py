"""Directory listing — enumerate a directory in a fixed, total order.

Directories come first, then files; each group is ordered by name
under plain code-point comparison (case-sensitive, ``"B" < "a"``). The
order depends only on the directory's contents, never on the order
the filesystem happens to enumerate them in.

Names are compared without the trailing ``/`` that directories get in
the listing, so ``a/`` sorts before ``a-b/`` even though ``"a-b/" < "a/"``.

Names that are not valid UTF-8 can't be shown or linked in a page and
are left out, like any other entry that can't be classified.
"""

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path

from dirserve.errors import DirectoryUnreadable

logger = logging.getLogger("dirserve.listing")


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """One immediate child of a listed directory."""

    name: str
    is_directory: bool

    @property
    def display_name(self) -> str:
        """Name as shown and linked in a listing; directories end in ``/``."""
        if self.is_directory:
            return f"{self.name}/"
        return self.name

    @property
    def sort_key(self) -> tuple[bool, str]:
        return (not self.is_directory, self.name)


def _classify(directory: Path, name: str) -> DirectoryEntry | None:
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        logger.debug("Skipping entry with undecodable name %r in %s", name, directory)
        return None
    # Independent stat per entry, following symlinks. Entries that vanish
    # mid-enumeration or can't be stat'ed are dropped.
    try:
        mode = os.stat(directory / name).st_mode
    except (OSError, ValueError) as exc:
        logger.debug("Skipping unreadable entry %r in %s: %s", name, directory, exc)
        return None
    return DirectoryEntry(name=name, is_directory=stat.S_ISDIR(mode))


def list_directory(directory: Path) -> list[DirectoryEntry]:
    """Return the immediate entries of ``directory``, directories first.

    Raises ``DirectoryUnreadable`` when the directory itself can't be
    enumerated (permissions, removed concurrently). Individual entries
    that can't be classified are omitted instead.
    """
    try:
        with os.scandir(directory) as it:
            names = [entry.name for entry in it]
    except OSError as exc:
        raise DirectoryUnreadable(directory) from exc

    entries = [entry for name in names if (entry := _classify(directory, name)) is not None]
    entries.sort(key=lambda entry: entry.sort_key)
    return entries
