import uuid
from typing import Union

from hookrelay.schemas.github import CheckRunEvent, PushEvent, ValidatedEvent
from hookrelay.schemas.message import (
    CanonicalMessage,
    CheckRunMessage,
    PushMessage,
    SourceConfig,
)
from hookrelay.schemas.webhook import EventKind

PUSH_NAMESPACE = uuid.UUID("B15B01C2-0228-49E7-8432-EA17E5A1B69C")
CHECK_RUN_NAMESPACE = uuid.UUID("5C0E6A34-2F7B-4D1E-9A83-0B6E4C2D71F9")

PUSH_TOPIC = "github:push"
CHECK_RUN_TOPIC = "github:check_run"


class Skip:
    """Returned instead of a message when the event is acknowledged but not forwarded"""

    def __init__(self, reason: str):
        self.reason = reason

    def __repr__(self):
        return f"Skip({self.reason!r})"


def push_message_id(event: PushEvent) -> str:
    # Redelivery of the same push yields the same id
    return str(uuid.uuid5(PUSH_NAMESPACE, f"{event.ref}/{event.after}"))


def check_run_message_id(event: CheckRunEvent) -> str:
    return str(
        uuid.uuid5(
            CHECK_RUN_NAMESPACE, f"{event.check_run_id}/{event.action}/{event.after}"
        )
    )


def to_canonical(
    event: ValidatedEvent, delivery_id: str, source: SourceConfig
) -> Union[CanonicalMessage, Skip]:
    if isinstance(event, PushEvent):
        if event.is_deletion:
            return Skip("push event has empty after commit - no event created")
        return CanonicalMessage(
            delivery_id=delivery_id,
            kind=EventKind.PUSH,
            source_app=source.source_app,
            source_env=source.source_env,
            destination_topic=PUSH_TOPIC,
            message_id=push_message_id(event),
            payload=PushMessage(
                ref=event.ref,
                before=event.before,
                after=event.after,
                repo=event.repo_name,
                owner=event.repo_owner,
            ),
        )

    if isinstance(event, CheckRunEvent):
        return CanonicalMessage(
            delivery_id=delivery_id,
            kind=EventKind.CHECK_RUN,
            source_app=source.source_app,
            source_env=source.source_env,
            destination_topic=CHECK_RUN_TOPIC,
            message_id=check_run_message_id(event),
            payload=CheckRunMessage(
                action=event.action,
                owner=event.repo_owner,
                repo=event.repo_name,
                check_run_name=event.check_run_name,
                check_run_id=event.check_run_id,
                ref=event.ref,
                head_branch=event.head_branch,
                before=event.before,
                after=event.after,
            ),
        )

    raise TypeError(f"Cannot map event of type {type(event).__name__}")
