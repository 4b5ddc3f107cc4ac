"""The portfolio site: routes, middleware and database wired onto an App."""

from folio.app import App
from folio.config import AppConfig, Settings, load_settings
from folio.controllers import contact, home, login, projects
from folio.controllers.admin import dashboard, messages
from folio.errors import ConfigurationError
from folio.middleware.csrf import CSRFMiddleware
from folio.middleware.sessions import SessionConfig, SessionMiddleware
from folio.middleware.static import StaticFiles

ROUTES = (
    ("GET", "/", home.index),
    ("GET", "/about", home.about),
    ("GET", "/projects", projects.index),
    ("GET", "/contact", contact.index),
    ("POST", "/contact", contact.post),
    ("GET", "/login", login.index),
    ("POST", "/login", login.login),
    ("POST", "/logout", login.logout),
    ("GET", "/admin/dashboard", dashboard.index),
    ("GET", "/admin/messages", messages.index),
    ("POST", "/admin/messages/{id}/toggle-read", messages.toggle_read),
    ("POST", "/admin/messages/{id}/delete", messages.delete),
)


def create_app(config: AppConfig | None = None, settings: Settings | None = None) -> App:
    """Build the site.

    *settings* defaults to ``load_settings()`` (the ``.env`` file). The
    session secret comes from ``config.secret_key``, else ``SECRET_KEY``.

    Raises:
        ConfigurationError: If no session secret is configured.
    """
    config = config or AppConfig()
    settings = settings if settings is not None else load_settings()

    secret_key = config.secret_key or settings.secret_key
    if not secret_key:
        msg = "No session secret configured. Set SECRET_KEY in .env or AppConfig.secret_key."
        raise ConfigurationError(msg)

    app = App(config, settings=settings, db=config.database_url)

    for method, path, handler in ROUTES:
        app.add_route(method, path, handler)

    if config.static_dir is not None:
        app.add_middleware(StaticFiles(config.static_dir, prefix=config.static_url))
    app.add_middleware(
        SessionMiddleware(
            SessionConfig(
                secret_key=secret_key,
                cookie_name=config.session_cookie,
                max_age=config.session_max_age,
            )
        )
    )
    if config.csrf_rotate_on_get:
        app.add_middleware(CSRFMiddleware())

    return app
