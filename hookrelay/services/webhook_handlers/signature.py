"""HMAC verification of GitHub webhook deliveries.

GitHub signs the raw request body with the webhook secret and sends the
digest as ``sha256=<hex>`` in ``X-Hub-Signature-256`` and, for older hooks,
as ``sha1=<hex>`` in ``X-Hub-Signature``.
"""

import base64
import binascii
import hashlib
import hmac
import re
from typing import Optional, Union
from urllib.parse import parse_qs

from hookrelay.core.errors import (
    AuthenticationError,
    MalformedRequestError,
    MissingSignatureError,
)
from hookrelay.schemas.webhook import (
    SHA1_SIGNATURE_HEADER,
    SHA256_SIGNATURE_HEADER,
    RawRequest,
    VerifiedPayload,
)

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"

_DIGESTS = {
    "sha256": hashlib.sha256,
    "sha1": hashlib.sha1,
}

_TOKEN = r"[!#$%&'*+.^_`|~0-9a-z-]+"
_MEDIA_TYPE_RE = re.compile(rf"^{_TOKEN}/{_TOKEN}$")


def select_signature(request: RawRequest) -> Optional[str]:
    """Return the SHA-256 signature header, falling back to SHA-1"""
    return request.header(SHA256_SIGNATURE_HEADER) or request.header(
        SHA1_SIGNATURE_HEADER
    )


def parse_media_type(content_type: Optional[str]) -> str:
    if not content_type:
        raise MalformedRequestError("parse media type from '': no media type")

    media_type, *params = content_type.split(";")
    media_type = media_type.strip().lower()
    if not _MEDIA_TYPE_RE.match(media_type):
        raise MalformedRequestError(
            f"parse media type from '{content_type}': invalid media type"
        )
    for param in params:
        if param.strip() and "=" not in param:
            raise MalformedRequestError(
                f"parse media type from '{content_type}': invalid media parameter"
            )
    return media_type


def decode_body(body: Union[str, bytes], is_base64_encoded: bool) -> bytes:
    if isinstance(body, str):
        body = body.encode()
    if not is_base64_encoded:
        return body
    try:
        # Line-wrapped encodings are accepted
        return base64.b64decode(body.replace(b"\r", b"").replace(b"\n", b""), validate=True)
    except (binascii.Error, ValueError) as e:
        raise MalformedRequestError(f"decoding body: {e}") from e


def compute_signature(body: bytes, secret: bytes, algorithm: str = "sha256") -> str:
    """Signature header value GitHub would send for ``body``"""
    digest = hmac.new(secret, body, _DIGESTS[algorithm]).hexdigest()
    return f"{algorithm}={digest}"


def verify_signature(body: bytes, signature: Optional[str], secret: bytes) -> None:
    if not signature:
        raise MissingSignatureError()

    algorithm, sep, received = signature.partition("=")
    if not sep or algorithm not in _DIGESTS:
        raise AuthenticationError("signature has an unsupported hash prefix")
    try:
        received_mac = bytes.fromhex(received)
    except ValueError:
        raise AuthenticationError("signature digest is not valid hex")

    expected_mac = hmac.new(secret, body, _DIGESTS[algorithm]).digest()
    if not hmac.compare_digest(received_mac, expected_mac):
        raise AuthenticationError("payload signature check failed")


def verify_payload(
    body: bytes,
    signature: Optional[str],
    secret: bytes,
    content_type: Optional[str],
) -> VerifiedPayload:
    """Check ``signature`` against the raw body and extract the payload.

    Form encoded deliveries carry the JSON document in the ``payload`` field;
    the signature always covers the raw body as sent.
    """
    media_type = parse_media_type(content_type)
    if media_type not in (JSON_MEDIA_TYPE, FORM_MEDIA_TYPE):
        raise MalformedRequestError(
            f"webhook request has unsupported Content-Type {media_type!r}"
        )

    verify_signature(body, signature, secret)

    if media_type == FORM_MEDIA_TYPE:
        try:
            form = parse_qs(body.decode(), keep_blank_values=True)
        except UnicodeDecodeError as e:
            raise MalformedRequestError(f"decoding form body: {e}") from e
        if "payload" not in form:
            raise MalformedRequestError("form body has no 'payload' field")
        return VerifiedPayload(media_type=media_type, data=form["payload"][0].encode())

    return VerifiedPayload(media_type=media_type, data=body)
