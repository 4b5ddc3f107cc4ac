"""Site data types: contact messages and showcase projects."""

from folio.models.message import Message
from folio.models.project import PROJECTS, Project

__all__ = ["PROJECTS", "Message", "Project"]
