from typing import Any, Callable, List, Optional, Tuple

from hookrelay.core.errors import UnsupportedEventError, ValidationError
from hookrelay.schemas.github import (
    CheckRunEnvelope,
    CheckRunEvent,
    CheckRunEventPayload,
    EventEnvelope,
    PushEnvelope,
    PushEvent,
    PushPayload,
    UnsupportedEnvelope,
    ValidatedEvent,
)
from hookrelay.schemas.webhook import EventKind

FieldCheck = Tuple[str, Callable[[Any], Any]]


def _get(obj: Optional[Any], *attrs: str) -> Optional[Any]:
    for attr in attrs:
        if obj is None:
            return None
        obj = getattr(obj, attr)
    return obj


# Evaluated in order; the first missing path is the one reported
PUSH_REQUIRED_FIELDS: List[FieldCheck] = [
    ("ref", lambda p: p.ref),
    ("repo", lambda p: p.repo),
    ("repo.owner", lambda p: _get(p.repo, "owner")),
    ("repo.owner.name", lambda p: _get(p.repo, "owner", "name")),
    ("repo.name", lambda p: _get(p.repo, "name")),
    ("after", lambda p: p.after),
    ("before", lambda p: p.before),
]

CHECK_RUN_REQUIRED_FIELDS: List[FieldCheck] = [
    ("action", lambda p: p.action),
    ("repo", lambda p: p.repo),
    ("repo.owner", lambda p: _get(p.repo, "owner")),
    ("repo.owner.login", lambda p: _get(p.repo, "owner", "login")),
    ("repo.name", lambda p: _get(p.repo, "name")),
    ("check_run", lambda p: p.check_run),
    ("check_run.name", lambda p: _get(p.check_run, "name")),
    ("check_run.id", lambda p: _get(p.check_run, "id")),
    ("check_run.check_suite", lambda p: _get(p.check_run, "check_suite")),
    ("check_run.check_suite.head_branch", lambda p: _get(p.check_run, "check_suite", "head_branch")),
    ("check_run.check_suite.before_sha", lambda p: _get(p.check_run, "check_suite", "before_sha")),
    ("check_run.check_suite.after_sha", lambda p: _get(p.check_run, "check_suite", "after_sha")),
]


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    return True


def check_required(payload: Any, fields: List[FieldCheck], kind: str) -> None:
    for path, accessor in fields:
        if not _is_present(accessor(payload)):
            raise ValidationError(path, kind)


def validate_push(payload: PushPayload) -> PushEvent:
    check_required(payload, PUSH_REQUIRED_FIELDS, EventKind.PUSH.value)
    return PushEvent(
        ref=payload.ref,
        before=payload.before,
        after=payload.after,
        repo_name=payload.repo.name,
        repo_owner=payload.repo.owner.name,
    )


def validate_check_run(payload: CheckRunEventPayload) -> CheckRunEvent:
    check_required(payload, CHECK_RUN_REQUIRED_FIELDS, EventKind.CHECK_RUN.value)
    suite = payload.check_run.check_suite
    return CheckRunEvent(
        action=payload.action,
        repo_owner=payload.repo.owner.login,
        repo_name=payload.repo.name,
        check_run_name=payload.check_run.name,
        check_run_id=payload.check_run.id,
        head_branch=suite.head_branch,
        before=suite.before_sha,
        after=suite.after_sha,
    )


def validate(envelope: EventEnvelope) -> ValidatedEvent:
    """Check structural completeness and return the strict event"""
    if isinstance(envelope, PushEnvelope):
        return validate_push(envelope.payload)
    if isinstance(envelope, CheckRunEnvelope):
        return validate_check_run(envelope.payload)
    if isinstance(envelope, UnsupportedEnvelope):
        raise UnsupportedEventError(envelope.event_type)
    raise TypeError(f"Unknown event envelope: {type(envelope).__name__}")
