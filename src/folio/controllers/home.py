from folio.context import RequestContext
from folio.http.response import Response


async def index(ctx: RequestContext) -> Response:
    return ctx.render("home")


async def about(ctx: RequestContext) -> Response:
    return ctx.render("about")
