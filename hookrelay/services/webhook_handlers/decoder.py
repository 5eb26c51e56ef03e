import json
from typing import Optional

import pydantic

from hookrelay.core.errors import ParseError
from hookrelay.schemas.github import (
    CheckRunEnvelope,
    CheckRunEventPayload,
    EventEnvelope,
    PushEnvelope,
    PushPayload,
    UnsupportedEnvelope,
)
from hookrelay.schemas.webhook import EventKind


def decode(event_type: Optional[str], payload: bytes) -> EventEnvelope:
    """Parse a verified payload as the event named by ``X-GitHub-Event``.

    Unknown event names are not an error here; they come back as an
    ``UnsupportedEnvelope`` so the handler can answer with a client error.
    """
    if event_type == EventKind.PUSH.value:
        return PushEnvelope(payload=_parse(PushPayload, event_type, payload))
    if event_type == EventKind.CHECK_RUN.value:
        return CheckRunEnvelope(payload=_parse(CheckRunEventPayload, event_type, payload))
    return UnsupportedEnvelope(event_type=event_type or "")


def _parse(model, event_type: str, payload: bytes):
    try:
        document = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"parsing webhook: {event_type} payload is not valid JSON: {e}") from e

    if not isinstance(document, dict):
        raise ParseError(f"parsing webhook: {event_type} payload is not a JSON object")

    try:
        return model.model_validate(document)
    except pydantic.ValidationError as e:
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
        raise ParseError(f"parsing webhook: invalid {event_type} payload fields: {fields}") from e
