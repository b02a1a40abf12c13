"""Built-in dirserve template filters.

Auto-registered on every dirserve kida Environment.
"""

from typing import Any
from urllib.parse import quote


def quote_path(value: Any) -> str:
    """Percent-encode a path or entry name for use in an ``href``.

    Keeps ``/`` so directory entries stay links into the directory.

    Example:
        <a href="{{ entry | quote_path }}">
        → "my%20notes/"
    """
    return quote(str(value), safe="/", errors="surrogateescape")


BUILTIN_FILTERS: dict[str, Any] = {
    "quote_path": quote_path,
}
