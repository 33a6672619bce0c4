"""HTTP middleware. Applied in main app; order matters (first added = outermost)."""

from member_audit.middleware.actor_context import ActorContextMiddleware

__all__ = ["ActorContextMiddleware"]
