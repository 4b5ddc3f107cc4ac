"""Template composition on top of jinja2."""

from folio.templating.views import Template, create_environment

__all__ = ["Template", "create_environment"]
