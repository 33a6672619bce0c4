"""Actor context: who is making the current change.

One ActorContext instance is created per request (or unit of work) and
bound to the current async task/thread through a ContextVar, so concurrent
requests never see each other's attribution. Sessions may also carry an
explicit binding (see infrastructure.persistence.database.bind_actor_context),
which takes precedence.

Usage:
    ctx = ActorContext()
    ctx.set_actor("alice", "7d1c...")
    token = use_actor_context(ctx)
    try:
        ...  # writes made here are attributed to alice
    finally:
        reset_actor_context(token)
"""

from contextvars import ContextVar, Token
from dataclasses import dataclass


@dataclass(frozen=True)
class ActorSnapshot:
    """Immutable snapshot of the actor at audit-build time. Both fields may be None."""

    name: str | None = None
    user_id: str | None = None

    @property
    def is_anonymous(self) -> bool:
        return not self.name and not self.user_id


ANONYMOUS = ActorSnapshot()


class ActorContext:
    """Mutable, request-scoped holder of the current actor (name + id).

    Not thread-shared: create one per request or unit of work.
    """

    def __init__(self, name: str | None = None, user_id: str | None = None) -> None:
        self._name = name or None
        self._user_id = user_id or None

    def set_actor(self, name: str | None, user_id: str | None) -> None:
        """Attribute subsequent writes to this actor. Empty strings count as absent."""
        self._name = name or None
        self._user_id = user_id or None

    def clear(self) -> None:
        """Forget the actor; subsequent writes carry blank attribution."""
        self._name = None
        self._user_id = None

    def current(self) -> ActorSnapshot:
        """Return the actor as an immutable snapshot (empty when unset)."""
        if self._name is None and self._user_id is None:
            return ANONYMOUS
        return ActorSnapshot(name=self._name, user_id=self._user_id)

    @property
    def is_set(self) -> bool:
        return self._name is not None or self._user_id is not None

    def __repr__(self) -> str:
        return f"ActorContext(name={self._name!r}, user_id={self._user_id!r})"


_current_actor_context: ContextVar[ActorContext | None] = ContextVar(
    "current_actor_context", default=None
)


def use_actor_context(context: ActorContext | None) -> Token[ActorContext | None]:
    """Bind an actor context to the current task. Returns a token for reset_actor_context."""
    return _current_actor_context.set(context)


def reset_actor_context(token: Token[ActorContext | None]) -> None:
    """Restore the binding that was active before use_actor_context."""
    _current_actor_context.reset(token)


def get_actor_context() -> ActorContext | None:
    """Return the actor context bound to the current task, or None."""
    return _current_actor_context.get()


def current_actor() -> ActorSnapshot:
    """Return the current task's actor snapshot (anonymous when nothing is bound)."""
    context = _current_actor_context.get()
    if context is None:
        return ANONYMOUS
    return context.current()
