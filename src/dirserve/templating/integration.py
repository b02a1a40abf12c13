"""Kida environment setup.

Creates the kida Environment used to render ``Template`` bodies. The
environment is created once per listing server and shared read-only
across requests.
"""

from collections.abc import Sequence
from pathlib import Path

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from dirserve.templating.filters import BUILTIN_FILTERS
from dirserve.templating.returns import Template


def create_environment(template_dirs: Sequence[str | Path] = ()) -> Environment:
    """Create a kida Environment for listing templates.

    User directories are searched first, so dropping a ``listing.html``
    into one of them overrides the packaged template.
    """
    loaders = [FileSystemLoader(str(d)) for d in template_dirs]

    # dirserve's built-in templates
    loaders.append(PackageLoader("dirserve.templating", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.update_filters(BUILTIN_FILTERS)
    return env


def render_template(env: Environment, tpl: Template) -> str:
    """Render a full template to string."""
    template = env.get_template(tpl.name)
    return template.render(tpl.context)
