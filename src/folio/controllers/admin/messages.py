"""Admin inbox: list, toggle read, delete."""

from folio.context import RequestContext
from folio.controllers.base import handle_invalid_request, login_required
from folio.http.response import Response
from folio.repositories.messages import MessageRepository


@login_required
async def index(ctx: RequestContext) -> Response:
    messages = MessageRepository(ctx.database)
    return ctx.render(
        "admin/messages",
        messages=await messages.find_all(),
        count=await messages.count(),
        count_unread=await messages.count_unread(),
    )


@login_required
async def toggle_read(ctx: RequestContext, message_id: str) -> Response:
    if not await ctx.validate_csrf_token():
        return await handle_invalid_request(ctx, "Invalid security token")

    messages = MessageRepository(ctx.database)
    message = await messages.find(int(message_id))
    if message is None:
        return await handle_invalid_request(ctx, "Could not find message")

    await messages.update_read_status(message.id, not message.is_read)
    return ctx.redirect("/admin/messages")


@login_required
async def delete(ctx: RequestContext, message_id: str) -> Response:
    if not await ctx.validate_csrf_token():
        return await handle_invalid_request(ctx, "Invalid security token")

    messages = MessageRepository(ctx.database)
    message = await messages.find(int(message_id))
    if message is None:
        return await handle_invalid_request(ctx, "Could not find message")

    await messages.delete(message.id)
    return ctx.redirect("/admin/messages")
