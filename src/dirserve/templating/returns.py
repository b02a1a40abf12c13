"""Renderer return types and the default listing renderer.

A renderer turns a directory label and its ordered entry names into a
body. It must be pure: no I/O, same inputs give the same output. Work
that needs I/O (loading a template) is deferred by returning a
``Template`` descriptor, which the host renders through kida.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Template:
    """Render a full kida template.

    Usage::

        return Template("listing.html", directory="/docs/", entries=["a/", "b.txt"])
    """

    name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)


# What a renderer may hand back to the host
type RenderedBody = Template | str | bytes

# (directory label, ordered entry names) -> body
type Renderer = Callable[[str, Sequence[str]], RenderedBody]


def listing_template(directory: str, entries: Sequence[str]) -> Template:
    """Default renderer: the packaged ``listing.html`` template.

    Entry names are relative (directories carry a trailing ``/``), so
    they can be used directly as link targets.
    """
    return Template("listing.html", directory=directory, entries=list(entries))
