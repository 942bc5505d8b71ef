from typing import Optional


class ChatRelayError(Exception):
    """Base class for every failure a chat turn can end in."""


class ValidationError(ChatRelayError):
    def __init__(self, message: str = "message is required"):
        super().__init__(message)
        self.message = message


class ConfigurationError(ChatRelayError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RemoteServiceError(ChatRelayError):
    """
    The remote service answered with a non-success status.

    The status code and raw body are kept untouched so the caller sees
    exactly what the remote service said.
    """

    def __init__(
        self,
        status_code: int,
        body: bytes,
        content_type: Optional[str] = None,
        operation: str = "",
    ):
        super().__init__(f"{operation or 'remote call'} failed with {status_code}")
        self.status_code = status_code
        self.body = body
        self.content_type = content_type
        self.operation = operation


class RemoteServiceUnavailableError(ChatRelayError):
    """The remote service could not be reached at all (connect error, timeout)."""

    def __init__(self, operation: str = ""):
        super().__init__(f"{operation or 'remote call'} did not get a response")
        self.operation = operation


class RunNotCompletedError(ChatRelayError):
    def __init__(self, status: str):
        super().__init__(f"Run {status}")
        self.status = status


class MalformedRemoteResponseError(ChatRelayError):
    """A success response from the remote service lacked a field the turn needs."""

    def __init__(self, operation: str, field: str):
        super().__init__(f"{operation} response has no {field}")
        self.operation = operation
        self.field = field
