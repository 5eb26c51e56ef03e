from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, field_validator

SHA256_SIGNATURE_HEADER = "X-Hub-Signature-256"
SHA1_SIGNATURE_HEADER = "X-Hub-Signature"
EVENT_TYPE_HEADER = "X-GitHub-Event"
DELIVERY_ID_HEADER = "X-GitHub-Delivery"
CONTENT_TYPE_HEADER = "Content-Type"


class EventKind(str, Enum):
    PUSH = "push"
    CHECK_RUN = "check_run"


class RawRequest(BaseModel):
    """Inbound webhook request as handed over by the transport"""

    headers: Dict[str, str] = {}
    body: Union[str, bytes] = b""
    is_base64_encoded: bool = False

    @field_validator("headers")
    @classmethod
    def lowercase_header_names(cls, headers: Dict[str, str]) -> Dict[str, str]:
        return {k.lower(): v for k, v in headers.items()}

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup; empty values count as absent"""
        return self.headers.get(name.lower()) or None


class VerifiedPayload(BaseModel):
    """Payload bytes whose signature matched the shared secret"""

    media_type: str
    data: bytes


class WebhookResponse(BaseModel):
    status_code: int
    body: str
