from folio.context import RequestContext
from folio.controllers.base import login_required
from folio.http.response import Response
from folio.repositories.messages import MessageRepository


@login_required
async def index(ctx: RequestContext) -> Response:
    messages = MessageRepository(ctx.database)
    return ctx.render("admin/dashboard", count_unread=await messages.count_unread())
