"""Actor context middleware.

Creates one ActorContext per HTTP request, fills it from the authenticated
user (Starlette's scope["user"], set by an upstream AuthenticationMiddleware)
or, behind a trusted gateway, from actor headers, and binds it to the
request's task for the duration of the request. Cleared at request end.
Uses raw ASGI (no BaseHTTPMiddleware) so the binding covers the endpoint and
its dependencies.
"""

from typing import Any, Callable

from member_audit.shared.context import (
    ActorContext,
    reset_actor_context,
    use_actor_context,
)


def _get_header(scope: dict, name: str) -> str | None:
    """Return first header value for name (case-insensitive)."""
    want = name.lower().encode()
    for k, v in scope.get("headers", []):
        if k.lower() == want:
            return v.decode("utf-8", errors="replace")
    return None


def _authenticated_actor(scope: dict) -> tuple[str | None, str | None] | None:
    user: Any = scope.get("user")
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    name = getattr(user, "display_name", None) or None
    try:
        user_id = user.identity
    except (AttributeError, NotImplementedError):
        user_id = None
    return name, user_id or None


def ActorContextMiddleware(
    app: Callable,
    name_header: str = "X-Actor-Name",
    id_header: str = "X-Actor-Id",
    trust_headers: bool = False,
) -> Callable:
    """Bind a request-scoped ActorContext; expose it as request.state.actor_context. Raw ASGI."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        context = ActorContext()
        actor = _authenticated_actor(scope)
        if actor is None and trust_headers:
            actor = (_get_header(scope, name_header), _get_header(scope, id_header))
        if actor is not None:
            context.set_actor(*actor)
        scope.setdefault("state", {})["actor_context"] = context

        token = use_actor_context(context)
        try:
            await app(scope, receive, send)
        finally:
            context.clear()
            reset_actor_context(token)

    return asgi_app
