"""Admin login and logout."""

import logging

from folio.context import RequestContext
from folio.controllers.base import (
    flash_errors,
    flash_old_input,
    handle_invalid_request,
    is_rate_limited,
)
from folio.forms.credentials import Credentials
from folio.http.response import Response
from folio.security.audit import emit_security_event
from folio.security.passwords import check_admin_password
from folio.security.rate_limit import LOGIN_LIMITER

logger = logging.getLogger("folio.security")

ADMIN_USER_ID = 1


async def index(ctx: RequestContext) -> Response:
    if ctx.is_logged_in:
        return ctx.redirect("/admin/dashboard")
    return ctx.render("login")


async def login(ctx: RequestContext) -> Response:
    if not await ctx.validate_csrf_token():
        return await handle_invalid_request(ctx, "Invalid security token")

    if is_rate_limited(ctx, LOGIN_LIMITER, "login"):
        return await handle_invalid_request(ctx, "Too many login attempts. Please try again later.")

    credentials = await Credentials.from_request(ctx.request)
    errors = credentials.validate()
    if errors:
        flash_errors(ctx.sess, errors)
        flash_old_input(ctx.sess, credentials.to_dict())
        return ctx.redirect("/login")

    admin_email = (ctx.settings.admin_email or "").strip().lower()
    if credentials.email != admin_email or not check_admin_password(
        credentials.password, ctx.settings.admin_password
    ):
        logger.warning("Failed login for %s", credentials.email)
        emit_security_event("login.failed", request=ctx.request, details={"email": credentials.email})
        flash_errors(ctx.sess, {"general": ["Invalid credentials"]})
        flash_old_input(ctx.sess, credentials.to_dict())
        return ctx.redirect("/login")

    session = ctx.sess
    LOGIN_LIMITER.clear(session, "login")
    session.regenerate()
    session["user_id"] = ADMIN_USER_ID
    session["user_email"] = credentials.email
    session.flash("success", f"Welcome back, {credentials.email}!")

    logger.info("Admin %s logged in", credentials.email)
    emit_security_event("login.succeeded", request=ctx.request, user_id=str(ADMIN_USER_ID))
    return ctx.redirect("/admin/dashboard")


async def logout(ctx: RequestContext) -> Response:
    if not await ctx.validate_csrf_token():
        return await handle_invalid_request(ctx, "Invalid security token")

    ctx.sess.regenerate()
    ctx.sess.flash("success", "You have been logged out successfully.")
    emit_security_event("logout", request=ctx.request)
    return ctx.redirect("/login")
