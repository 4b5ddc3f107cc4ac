"""folio application class.

Mutable during setup (route registration, middleware, hooks).
Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jinja2 import Environment

from folio._internal.asgi import Receive, Scope, Send
from folio._internal.invoke import invoke
from folio.config import AppConfig, Settings
from folio.data.database import Database
from folio.data.migrate import MigrationResult, migrate
from folio.middleware.protocol import Middleware
from folio.routing.router import Router
from folio.server.handler import handle_request
from folio.templating.views import create_environment

logger = logging.getLogger("folio.server")

type Handler = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    method: str
    path: str
    handler: Handler


class App:
    """The folio application.

    Mutable during setup (route registration, middleware, filters).
    Frozen at runtime when ``app.run()`` or ``__call__()`` is first invoked.

    Usage::

        app = App(AppConfig(secret_key="..."), settings=load_settings())

        @app.get("/")
        async def index(ctx: RequestContext) -> Response:
            return ctx.render("home")

    Thread safety:
        The freeze transition uses a Lock plus a double check so exactly
        one thread compiles the app.
    """

    __slots__ = (
        "_db",
        "_env",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_list",
        "_pending_routes",
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "_template_filters",
        "_template_globals",
        "config",
        "settings",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        settings: Settings | None = None,
        db: Database | str | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.settings: Settings = settings or Settings()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._template_filters: dict[str, Callable[..., Any]] = {}
        self._template_globals: dict[str, Any] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._frozen = False
        self._freeze_lock = threading.Lock()

        self._db: Database | None = Database(db) if isinstance(db, str) else db

        # Compiled state, set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Middleware, ...] = ()
        self._env: Environment | None = None

    # -- Route registration --

    def route(self, path: str, *, methods: list[str] | None = None) -> Callable[[Handler], Handler]:
        """Register a handler for *path* via decorator. Methods default to GET."""

        def decorator(func: Handler) -> Handler:
            for method in methods or ["GET"]:
                self.add_route(method, path, func)
            return func

        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["GET"])

    def post(self, path: str) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["POST"])

    def add_route(self, method: str, path: str, handler: Handler) -> None:
        """Register *handler* directly. Routes match in registration order."""
        self._check_not_frozen()
        self._pending_routes.append(_PendingRoute(method.upper(), path, handler))

    @property
    def routes(self) -> list[tuple[str, str]]:
        """Registered ``(method, path)`` pairs."""
        return [(pending.method, pending.path) for pending in self._pending_routes]

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware. The first one added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    # -- Template integration --

    def template_filter(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a jinja2 template filter."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_filters[name or func.__name__] = func
            return func

        return decorator

    def template_global(
        self,
        name: str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register a jinja2 template global."""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self._check_not_frozen()
            self._template_globals[name or func.__name__] = func
            return func

        return decorator

    # -- Database --

    @property
    def db(self) -> Database | None:
        return self._db

    async def migrate(self) -> MigrationResult | None:
        """Apply pending migrations, if a database and directory are configured."""
        if self._db is None or self.config.migrations_dir is None:
            return None
        result = await migrate(self._db, self.config.migrations_dir)
        logger.info("%s", result.summary)
        return result

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order after the database is connected
        and migrated, before the first request is served.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator.

        Hooks run in registration order, before the database disconnects.
        """
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    async def startup(self) -> None:
        """Freeze, connect and migrate the database, then run startup hooks."""
        self._ensure_frozen()
        if self._db is not None:
            await self._db.connect()
            await self.migrate()
        for hook in self._startup_hooks:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run shutdown hooks, then disconnect the database."""
        for hook in self._shutdown_hooks:
            await invoke(hook)
        if self._db is not None:
            await self._db.disconnect()

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with uvicorn until interrupted."""
        import uvicorn

        self._ensure_frozen()
        uvicorn.run(
            self,
            host=host or self.config.host,
            port=port or self.config.port,
            log_level=self.config.log_level,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._router is not None
        assert self._env is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            config=self.config,
            settings=self.settings,
            env=self._env,
            db=self._db,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol around ``startup()``/``shutdown()``."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        router = Router()
        for pending in self._pending_routes:
            router.add(pending.method, pending.path, pending.handler)
        router.compile()
        self._router = router

        self._middleware = tuple(self._middleware_list)

        self._env = create_environment(
            self.config,
            filters=self._template_filters,
            globals_=self._template_globals,
        )

        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, middleware, and filters before calling app.run()."
            )
            raise RuntimeError(msg)
