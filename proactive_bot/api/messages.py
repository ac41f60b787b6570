"""
Microsoft Teams Bot Framework webhook endpoint.
Handles installationUpdate, conversationUpdate and message activities.
"""
import logging

from botbuilder.core import MessageFactory, TurnContext
from botbuilder.schema import Activity
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from proactive_bot.api import get_services
from proactive_bot.models.events import InstallEvent, parse_activity
from proactive_bot.services import BotServices
from proactive_bot.services.dispatcher import MessageDispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["bot"])


async def handle_turn(turn_context: TurnContext, dispatcher: MessageDispatcher):
    """
    Bot logic for a single activity.

    Errors are logged and swallowed so a malformed activity never takes
    down the service.
    """
    activity = turn_context.activity
    try:
        event = parse_activity(activity)
        if event is None:
            logger.debug(f"Ignoring activity type: {activity.type}")
            return

        if isinstance(event, InstallEvent):
            dispatcher.handle_install(event)
            return

        reply = dispatcher.handle_message(event)
        await turn_context.send_activity(MessageFactory.text(reply))
    except Exception as e:
        logger.error(f"Error in bot_logic: {e}", exc_info=True)


@router.post("/messages")
async def messages_webhook(request: Request, services: BotServices = Depends(get_services)):
    """
    Bot Framework webhook endpoint.

    Authentication is performed by the adapter against the Authorization header.
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    if not isinstance(body, dict):
        logger.warning("Webhook called without a JSON activity body")
        return JSONResponse(content={"error": "Request body must be a JSON activity"}, status_code=400)

    activity = Activity().deserialize(body)
    auth_header = request.headers.get("Authorization", "")
    logger.info(f"Received activity: {activity.type}")

    async def bot_logic(turn_context: TurnContext):
        await handle_turn(turn_context, services.dispatcher)

    try:
        invoke_response = await services.adapter.process_activity(activity, auth_header, bot_logic)
    except PermissionError as e:
        logger.warning(f"Rejected unauthenticated activity: {e}")
        return JSONResponse(content={"error": "Unauthorized"}, status_code=401)
    except Exception as e:
        logger.error(f"Error in webhook: {e}", exc_info=True)
        return JSONResponse(content={"error": str(e)}, status_code=500)

    if invoke_response:
        return JSONResponse(content=invoke_response.body, status_code=invoke_response.status)

    return JSONResponse(content={"status": "ok"}, status_code=200)
