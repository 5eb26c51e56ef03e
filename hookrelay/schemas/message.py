from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from hookrelay.schemas.webhook import EventKind


class SourceConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_app: str
    source_env: str


class PushMessage(BaseModel):
    ref: str
    before: str
    after: str
    repo: str
    owner: str


class CheckRunMessage(BaseModel):
    action: str
    owner: str
    repo: str
    check_run_name: str
    check_run_id: int
    ref: str
    head_branch: str
    before: str
    after: str


class CanonicalMessage(BaseModel):
    """Normalized outbound message handed to every sink"""

    model_config = ConfigDict(frozen=True)

    delivery_id: str
    kind: EventKind
    source_app: str
    source_env: str
    destination_topic: str
    message_id: str
    payload: Union[PushMessage, CheckRunMessage]


class PublishResult(BaseModel):
    sink_id: str
    ok: bool
    error: Optional[str] = None


class PublishReport(BaseModel):
    message_id: str
    results: List[PublishResult] = []

    def lines(self) -> List[str]:
        """Human readable trace used as the response body"""
        output = [f"message id: {self.message_id}"]
        for result in self.results:
            if result.ok:
                output.append(f"published to {result.sink_id}")
            else:
                output.append(f"failed to publish to {result.sink_id}: {result.error}")
        return output
