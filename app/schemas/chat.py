from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


NO_RESPONSE_TEXT = "(No response text)"


class ChatTurnRequest(BaseModel):
    message: str = Field(..., min_length=1)
    thread_id: Optional[str] = Field(
        None, description="Existing thread to continue; a new one is created when absent"
    )

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["ChatTurnRequest"]:
        """
        Build a request from a loosely typed JSON body.

        Returns None when ``message`` is missing, empty or not a string.
        A ``thread_id`` that is not a non-empty string counts as absent.
        """
        if not isinstance(payload, dict):
            return None

        message = payload.get("message")
        if not isinstance(message, str) or not message:
            return None

        thread_id = payload.get("thread_id")
        if not isinstance(thread_id, str) or not thread_id:
            thread_id = None

        return cls(message=message, thread_id=thread_id)


class ChatTurnResponse(BaseModel):
    thread_id: str
    reply: str


class ErrorResponse(BaseModel):
    error: str


class Thread(BaseModel):
    id: str


class Run(BaseModel):
    id: str
    status: str = "unknown"


class RunStatus:
    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"

    # the only two statuses that end polling early
    TERMINAL = frozenset({COMPLETED, FAILED})


def extract_reply_text(message_list: Dict[str, Any]) -> str:
    """Pull ``data[0].content[0].text.value`` out of a message listing."""
    try:
        value = message_list["data"][0]["content"][0]["text"]["value"]
    except (KeyError, IndexError, TypeError):
        return NO_RESPONSE_TEXT
    if not isinstance(value, str) or not value:
        return NO_RESPONSE_TEXT
    return value
