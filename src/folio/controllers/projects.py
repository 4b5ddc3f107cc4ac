from folio.context import RequestContext
from folio.http.response import Response
from folio.models.project import PROJECTS


async def index(ctx: RequestContext) -> Response:
    return ctx.render("projects", projects=PROJECTS)
