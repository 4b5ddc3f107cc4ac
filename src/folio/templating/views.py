"""Layout-aware template composition.

A page is composed in two explicit passes:

1. The view template (``<view>.html``) renders with the page data plus a
   ``view`` handle. While rendering it may choose a layout and define named
   sections::

       {{ view.extend("layout") }}
       {{ view.start("title", "About Me") }}
       {% set sidebar %}<aside>…</aside>{% endset %}
       {{ view.start("sidebar", sidebar) }}

   Everything the view outputs becomes the ``content`` section.

2. The layout template renders with the same data and emits sections::

       <title>{{ view.section("title") }}</title>
       <main>{{ view.section("content") }}</main>

   Unknown sections render as an empty string.

A ``Template`` holds per-build state, so create one per request; it can be
rebuilt any number of times but is not re-entrant mid-build.
"""

from collections.abc import Callable, Mapping
from typing import Any

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader
from markupsafe import Markup, escape

from folio.config import AppConfig
from folio.errors import TemplateNotBuiltError
from folio.templating.filters import BUILTIN_FILTERS, BUILTIN_GLOBALS

DEFAULT_LAYOUT = "layout"


def create_environment(
    config: AppConfig,
    filters: dict[str, Callable[..., Any]] | None = None,
    globals_: dict[str, Any] | None = None,
) -> Environment:
    """Create the jinja2 Environment for an app.

    Called once when the app is frozen. The configured template directory
    is searched first, then the templates bundled with the package.
    """
    loader = ChoiceLoader(
        [
            FileSystemLoader(str(config.template_dir)),
            PackageLoader("folio", "templates"),
        ]
    )
    env = Environment(
        loader=loader,
        autoescape=True,
        auto_reload=config.debug,
        trim_blocks=True,
        lstrip_blocks=True,
    )

    env.filters.update(BUILTIN_FILTERS)
    if filters:
        env.filters.update(filters)

    env.globals.update(BUILTIN_GLOBALS)
    if globals_:
        env.globals.update(globals_)

    return env


class Template:
    """Renders a view inside a layout using an explicit section map."""

    __slots__ = ("_content", "_env", "_layout", "_sections", "_view")

    def __init__(self, env: Environment) -> None:
        self._env = env
        self._view: str | None = None
        self._layout = DEFAULT_LAYOUT
        self._sections: dict[str, Markup] = {}
        self._content: str | None = None

    def build(self, view: str, data: Mapping[str, Any] | None = None) -> None:
        """Render *view* and then its layout, resetting any previous build."""
        self._view = view
        self._layout = DEFAULT_LAYOUT
        self._sections = {}
        self._content = None

        context = {**(data or {}), "view": self}

        inner = self._env.get_template(f"{view}.html").render(context)
        self._sections["content"] = Markup(inner)

        self._content = self._env.get_template(f"{self._layout}.html").render(context)

    def render(self) -> str:
        """Return the composed page.

        Raises:
            TemplateNotBuiltError: If ``build()`` has not run.
        """
        if self._content is None:
            msg = "Template has not been built. Call build() first."
            raise TemplateNotBuiltError(msg)
        return self._content

    # -- Called from inside templates --

    def extend(self, layout: str) -> str:
        """Select the layout for the current build."""
        self._layout = layout
        return ""

    def start(self, section: str, content: Any) -> str:
        """Define *section* with *content*. Plain strings are escaped on output."""
        self._sections[section] = escape(content)
        return ""

    def section(self, name: str) -> Markup:
        """Emit a previously defined section, or an empty string."""
        return self._sections.get(name, Markup(""))

    # -- Introspection --

    @property
    def layout(self) -> str:
        return self._layout

    @property
    def sections(self) -> Mapping[str, Markup]:
        return dict(self._sections)
