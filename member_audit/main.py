"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
No business logic here. See member_audit.core.lifespan and
member_audit.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and optionally
clear get_settings cache) before importing or calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from member_audit.api.v1 import api_router
from member_audit.core.config import get_settings
from member_audit.core.exception_handlers import register_exception_handlers
from member_audit.core.lifespan import create_lifespan
from member_audit.middleware import ActorContextMiddleware


def create_app() -> FastAPI:
    """Build and return the FastAPI application. Settings are resolved here (deferred from import)."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    # Middleware: last added = outermost, so the actor context wraps CORS.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        ActorContextMiddleware,
        name_header=settings.actor_name_header,
        id_header=settings.actor_id_header,
        trust_headers=settings.trust_actor_headers,
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()
