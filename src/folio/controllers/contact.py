"""Contact page and form submission."""

import logging

from folio.context import RequestContext
from folio.controllers.base import (
    flash_errors,
    flash_old_input,
    handle_invalid_request,
    is_rate_limited,
)
from folio.forms.contact import ContactForm
from folio.http.response import Response
from folio.repositories.messages import MessageRepository
from folio.security.rate_limit import CONTACT_LIMITER

logger = logging.getLogger("folio.server")


async def index(ctx: RequestContext) -> Response:
    return ctx.render("contact")


async def post(ctx: RequestContext) -> Response:
    """Check the token, then the rate limit, then the fields; store the message."""
    if not await ctx.validate_csrf_token():
        return await handle_invalid_request(ctx, "Invalid security token")

    if is_rate_limited(ctx, CONTACT_LIMITER, "contact"):
        return await handle_invalid_request(ctx, "Too many attempts. Please try again later.")

    form = await ContactForm.from_request(ctx.request)
    errors = form.validate()
    if errors:
        flash_errors(ctx.sess, errors)
        flash_old_input(ctx.sess, form.to_dict())
        return ctx.redirect("/contact")

    message = await MessageRepository(ctx.database).create(
        name=form.name,
        email=form.email,
        subject=form.subject,
        message=form.message,
    )
    logger.info("Stored contact message %d from %s", message.id, message.email)

    ctx.sess.flash("success", f"Thank you for contacting us, {form.name}!")
    return ctx.redirect("/contact")
