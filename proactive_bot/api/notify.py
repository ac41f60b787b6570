"""
Proactive messaging REST API.

POST /api/notify - Send a proactive message to a conversation
Body: {
  "conversationId": "<id>",
  "message": "<text>",
  "replyToId": "<optional message id for threading>",
  "mentions": [{"id": "<user AAD id>", "name": "<display name>"}]
}
To mention someone, include <at>Name</at> in the message text and add a
corresponding entry in the mentions array.

GET /api/conversations - List known conversations
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from proactive_bot.api import get_services
from proactive_bot.errors import NotifyValidationError
from proactive_bot.models.notify import NotifyRequest, NotifyResponse
from proactive_bot.services import BotServices

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["notify"])


def _describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    )


@router.post("/notify")
async def notify(request: Request, services: BotServices = Depends(get_services)) -> Dict[str, Any]:
    """Send a proactive message, optionally threaded and with mentions."""
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    try:
        notify_request = NotifyRequest.model_validate(body)
    except ValidationError as e:
        raise NotifyValidationError(f"Invalid notify request: {_describe_errors(e)}") from e

    activity_id = await services.notifier.send(notify_request)
    return NotifyResponse(activity_id=activity_id).model_dump(by_alias=True)


@router.get("/conversations")
async def list_conversations(services: BotServices = Depends(get_services)) -> Dict[str, Any]:
    """List conversations the bot can message proactively."""
    return services.notifier.list_conversations().model_dump(by_alias=True)
