"""HTTP routes: Bot Framework webhook and proactive messaging API."""
from fastapi import Request

from proactive_bot.services import BotServices


def get_services(request: Request) -> BotServices:
    """FastAPI dependency returning the services attached to the app."""
    return request.app.state.services
