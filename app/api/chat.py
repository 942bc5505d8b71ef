from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from app.api.deps import get_orchestrator
from app.core.errors import ValidationError
from app.schemas.chat import ChatTurnRequest, ChatTurnResponse, ErrorResponse
from app.services.conversation import ConversationTurnOrchestrator


router = APIRouter(tags=["chat"])


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Malformed or non-object JSON reads as an empty object."""
    try:
        payload = await request.json()
    except ValueError:
        return {}
    return payload if isinstance(payload, dict) else {}


@router.post(
    "/",
    response_model=ChatTurnResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@router.post(
    "/api/know2close",
    response_model=ChatTurnResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat_turn(
    request: Request,
    orchestrator: ConversationTurnOrchestrator = Depends(get_orchestrator),
):
    payload = await read_json_body(request)

    req = ChatTurnRequest.from_payload(payload)
    if req is None:
        raise ValidationError()

    return await orchestrator.handle_turn(req)
