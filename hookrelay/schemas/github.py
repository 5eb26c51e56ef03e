from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt

EMPTY_COMMIT = "0000000000000000000000000000000000000000"


class _Payload(BaseModel):
    # Read-only tree of optional fields; anything not listed is dropped
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class OwnerPayload(_Payload):
    name: Optional[str] = None
    login: Optional[str] = None


class RepositoryPayload(_Payload):
    name: Optional[str] = None
    owner: Optional[OwnerPayload] = None


class PushPayload(_Payload):
    ref: Optional[str] = None
    before: Optional[str] = None
    after: Optional[str] = None
    repo: Optional[RepositoryPayload] = Field(None, alias="repository")


class CheckSuitePayload(_Payload):
    head_branch: Optional[str] = None
    before_sha: Optional[str] = Field(None, alias="before")
    after_sha: Optional[str] = Field(None, alias="after")


class CheckRunPayload(_Payload):
    id: Optional[StrictInt] = None
    name: Optional[str] = None
    check_suite: Optional[CheckSuitePayload] = None


class CheckRunEventPayload(_Payload):
    action: Optional[str] = None
    repo: Optional[RepositoryPayload] = Field(None, alias="repository")
    check_run: Optional[CheckRunPayload] = None


class PushEnvelope(BaseModel):
    kind: Literal["push"] = "push"
    payload: PushPayload


class CheckRunEnvelope(BaseModel):
    kind: Literal["check_run"] = "check_run"
    payload: CheckRunEventPayload


class UnsupportedEnvelope(BaseModel):
    kind: Literal["unsupported"] = "unsupported"
    event_type: str


EventEnvelope = Annotated[
    Union[PushEnvelope, CheckRunEnvelope, UnsupportedEnvelope],
    Field(discriminator="kind"),
]


class PushEvent(BaseModel):
    """Push notification with every required field present"""

    model_config = ConfigDict(frozen=True)

    ref: str
    before: str
    after: str
    repo_name: str
    repo_owner: str

    @property
    def is_deletion(self) -> bool:
        return self.after == EMPTY_COMMIT


class CheckRunEvent(BaseModel):
    """Check run notification with every required field present"""

    model_config = ConfigDict(frozen=True)

    action: str
    repo_owner: str
    repo_name: str
    check_run_name: str
    check_run_id: int
    head_branch: str
    before: str
    after: str

    @property
    def ref(self) -> str:
        return f"refs/heads/{self.head_branch}"


ValidatedEvent = Union[PushEvent, CheckRunEvent]
