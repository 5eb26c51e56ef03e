"""Error taxonomy for webhook handling.

Every error carries the HTTP status the handler answers with. Messages are
safe to return to the webhook sender: they never contain the shared secret
or the signature value.
"""


class WebhookError(Exception):
    status_code = 400


class AuthenticationError(WebhookError):
    """Signature missing, malformed or not matching the payload"""


class MalformedRequestError(WebhookError):
    """Request cannot be interpreted: bad content type, body or headers"""


class MissingSignatureError(MalformedRequestError, AuthenticationError):
    def __init__(self):
        super().__init__("missing signature header")


class ParseError(WebhookError):
    """Payload is not valid structured data for the claimed event kind"""


class UnsupportedEventError(WebhookError):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(
            f"webhooks should only be configured for push or check_run events, got {kind!r}"
        )


class ValidationError(WebhookError):
    def __init__(self, field_path: str, kind: str):
        self.field_path = field_path
        self.kind = kind
        super().__init__(f"nil '{field_path}' on {kind} event")


class PublishError(WebhookError):
    status_code = 500

    def __init__(self, sink_id: str, cause: BaseException):
        self.sink_id = sink_id
        self.cause = cause
        super().__init__(f"publishing to {sink_id}: {cause}")


class ContextDoneError(Exception):
    """Request context was cancelled or ran past its deadline"""


class RequestCancelledError(ContextDoneError):
    def __init__(self):
        super().__init__("request cancelled")


class DeadlineExceededError(ContextDoneError):
    def __init__(self):
        super().__init__("request deadline exceeded")
