"""Save interceptor: stamps and audits every entity in a flush.

Hooked on the ORM Session class used by the session factory:

- before_flush: for each added / modified / deleted instance, stamp
  created/updated fields, diff it, and stage the audit entry. Old values come
  from attribute history, so the diff is taken before stamping.
- after_flush_postexec: back-fill primary keys of newly inserted rows and add
  the staged AuditLog rows to the session. Session.commit() flushes again
  until the session is clean, so they land in the same transaction.
- after_soft_rollback: drop anything still staged.

A failure while building an entry aborts the flush (AuditCaptureException),
so business rows never commit without their audit rows.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from sqlalchemy import Integer, event, inspect, select
from sqlalchemy.orm import Session, SessionTransaction, UOWTransaction

from member_audit.application.dtos.audit_log import AuditLogEntryCreate
from member_audit.application.services.audit_record_builder import AuditRecordBuilder
from member_audit.application.services.change_diff import ChangeDiffEngine
from member_audit.application.services.field_classification import (
    FieldClassificationRegistry,
    default_registry,
)
from member_audit.application.services.relationship_resolver import RelationshipResolver
from member_audit.domain.exceptions import AuditCaptureException, MemberAuditException
from member_audit.infrastructure.persistence.database import ACTOR_CONTEXT_KEY, AuditedSession
from member_audit.infrastructure.persistence.models.audit_log import AuditLog
from member_audit.infrastructure.persistence.models.identity import UserRole
from member_audit.infrastructure.persistence.models.mixins import StampedMixin
from member_audit.infrastructure.persistence.repositories.audit_log_repo import entry_to_orm
from member_audit.infrastructure.services.display_name_lookup import (
    SessionDisplayNameLookup,
    entity_display_name,
)
from member_audit.shared.context import ANONYMOUS, ActorSnapshot, get_actor_context
from member_audit.shared.enums import EntityState
from member_audit.shared.telemetry.logging import get_logger
from member_audit.shared.utils.datetime import utc_now

_logger = get_logger(__name__)

PENDING_ENTRIES_KEY = "audit_pending_entries"

_installed: dict[type[Session], AuditSaveInterceptor] = {}


def resolve_actor(session: Session) -> ActorSnapshot:
    """Session-bound actor context first, then the task-bound one, else anonymous."""
    context = session.info.get(ACTOR_CONTEXT_KEY) or get_actor_context()
    if context is None:
        return ANONYMOUS
    return context.current()


@dataclass
class _StagedEntry:
    entry: AuditLogEntryCreate
    source: Any = None


def _integer_identity(obj: Any) -> int | None:
    """Single integer primary key of an instance, else None (GUID and composite keys)."""
    mapper = inspect(obj).mapper
    if len(mapper.primary_key) != 1:
        return None
    column = mapper.primary_key[0]
    if not isinstance(column.type, Integer):
        return None
    prop = mapper.get_property_by_column(column)
    return getattr(obj, prop.key, None)


def _column_keys(obj: Any) -> list[str]:
    return [attr.key for attr in inspect(obj).mapper.column_attrs]


def _stored_values(session: Session, obj: Any, keys: list[str]) -> dict[str, Any]:
    """Column values as currently stored in the database for a persistent instance."""
    state = inspect(obj)
    if not keys or not state.has_identity:
        return {}
    mapper = state.mapper
    columns = [mapper.get_property(key).columns[0] for key in keys]
    criteria = [column == value for column, value in zip(mapper.primary_key, state.identity)]
    with session.no_autoflush:
        row = session.execute(select(*columns).where(*criteria)).first()
    if row is None:
        return {}
    return dict(zip(keys, row))


def _current_values(session: Session, obj: Any) -> list[tuple[str, Any]]:
    """(field, value) pairs for column attributes; expired ones are read from the row."""
    state = inspect(obj)
    keys = _column_keys(obj)
    stored = _stored_values(session, obj, [key for key in keys if key not in state.dict])
    values: list[tuple[str, Any]] = []
    for key in keys:
        if key in state.dict:
            values.append((key, state.dict[key]))
        elif key in stored:
            values.append((key, stored[key]))
    return values


def _modified_values(session: Session, obj: Any) -> list[tuple[str, Any, Any]]:
    """(field, old, new) triples for column attributes with pending changes.

    An attribute assigned while expired has no previous value in its history;
    its old value is read from the stored row instead.
    """
    state = inspect(obj)
    changed: list[tuple[str, Any, Any]] = []
    unknown: list[str] = []
    for key in _column_keys(obj):
        history = state.attrs[key].history
        if not history.has_changes():
            continue
        new = history.added[0] if history.added else None
        if history.deleted:
            changed.append((key, history.deleted[0], new))
        else:
            unknown.append(key)
            changed.append((key, None, new))
    stored = _stored_values(session, obj, unknown)
    return [(key, stored.get(key, old), new) for key, old, new in changed]


class AuditSaveInterceptor:
    """Flush hooks that turn pending entity changes into audit rows."""

    def __init__(
        self,
        registry: FieldClassificationRegistry | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.diff_engine = ChangeDiffEngine(registry or default_registry)
        self._clock = clock

    def _builder(self, session: Session, now: datetime) -> AuditRecordBuilder:
        resolver = RelationshipResolver(SessionDisplayNameLookup(session))
        return AuditRecordBuilder(self.diff_engine, resolver, clock=lambda: now)

    def before_flush(
        self, session: Session, _flush_context: UOWTransaction, _instances: Any
    ) -> None:
        actor = resolve_actor(session)
        now = self._clock()
        builder = self._builder(session, now)
        staged: list[_StagedEntry] = session.info.setdefault(PENDING_ENTRIES_KEY, [])

        for obj in list(session.new):
            if isinstance(obj, AuditLog):
                continue
            entry = self._capture(session, builder, obj, EntityState.ADDED, actor)
            if isinstance(obj, StampedMixin):
                obj.created_at = now
                obj.created_by = actor.name
            if entry is not None:
                staged.append(_StagedEntry(entry, obj))

        for obj in list(session.dirty):
            if isinstance(obj, AuditLog):
                continue
            if not session.is_modified(obj, include_collections=False):
                continue
            entry = self._capture(session, builder, obj, EntityState.MODIFIED, actor)
            if isinstance(obj, StampedMixin):
                obj.updated_at = now
                obj.updated_by = actor.name
            if entry is not None:
                staged.append(_StagedEntry(entry))

        for obj in list(session.deleted):
            if isinstance(obj, AuditLog):
                continue
            entry = self._capture(session, builder, obj, EntityState.DELETED, actor)
            if entry is not None:
                staged.append(_StagedEntry(entry))

        if staged:
            _logger.debug("Staged %d audit entries for flush", len(staged))

    def _capture(
        self,
        session: Session,
        builder: AuditRecordBuilder,
        obj: Any,
        state: EntityState,
        actor: ActorSnapshot,
    ) -> AuditLogEntryCreate | None:
        entity_type = type(obj).__name__
        try:
            if isinstance(obj, UserRole):
                return builder.build_for_role_link(
                    state, user_id=obj.user_id, role_id=obj.role_id, actor=actor
                )
            if state is EntityState.MODIFIED:
                return builder.build_for_entity(
                    entity_type,
                    state,
                    entity_id=_integer_identity(obj),
                    display_name=entity_display_name(obj),
                    modified=_modified_values(session, obj),
                    actor=actor,
                )
            return builder.build_for_entity(
                entity_type,
                state,
                entity_id=_integer_identity(obj),
                display_name=entity_display_name(obj),
                values=_current_values(session, obj),
                actor=actor,
            )
        except MemberAuditException:
            raise
        except Exception as e:
            raise AuditCaptureException(entity_type, str(e)) from e

    def after_flush_postexec(self, session: Session, _flush_context: UOWTransaction) -> None:
        staged: list[_StagedEntry] = session.info.pop(PENDING_ENTRIES_KEY, [])
        for item in staged:
            entry = item.entry
            if entry.entity_id is None and item.source is not None:
                entry = replace(entry, entity_id=_integer_identity(item.source))
            session.add(entry_to_orm(entry))

    def after_soft_rollback(self, session: Session, _previous: SessionTransaction) -> None:
        session.info.pop(PENDING_ENTRIES_KEY, None)

    def _listeners(self) -> list[tuple[str, Callable[..., None]]]:
        return [
            ("before_flush", self.before_flush),
            ("after_flush_postexec", self.after_flush_postexec),
            ("after_soft_rollback", self.after_soft_rollback),
        ]


def install_audit_hooks(
    session_class: type[Session] = AuditedSession,
    interceptor: AuditSaveInterceptor | None = None,
) -> AuditSaveInterceptor:
    """Attach the save interceptor to a Session class. Idempotent per class.

    Passing a different interceptor replaces the installed one.
    """
    current = _installed.get(session_class)
    if current is not None:
        if interceptor is None or interceptor is current:
            return current
        uninstall_audit_hooks(session_class)
    interceptor = interceptor or AuditSaveInterceptor()
    for name, fn in interceptor._listeners():
        event.listen(session_class, name, fn)
    _installed[session_class] = interceptor
    _logger.info("Audit hooks installed on %s", session_class.__name__)
    return interceptor


def uninstall_audit_hooks(session_class: type[Session] = AuditedSession) -> None:
    """Detach the save interceptor from a Session class (no-op when absent)."""
    interceptor = _installed.pop(session_class, None)
    if interceptor is None:
        return
    for name, fn in interceptor._listeners():
        if event.contains(session_class, name, fn):
            event.remove(session_class, name, fn)
    _logger.info("Audit hooks removed from %s", session_class.__name__)
