"""
Bot services and the container that wires them together.
"""
from typing import Optional

from botbuilder.core import BotFrameworkAdapter

from proactive_bot.config import BotSettings
from proactive_bot.services.adapter import create_adapter
from proactive_bot.services.dispatcher import MessageDispatcher
from proactive_bot.services.proactive_messaging import ProactiveNotifier
from proactive_bot.services.reference_registry import ConversationReferenceRegistry
from proactive_bot.services.state_store import ConversationStateStore


class BotServices:
    """Process-wide bot components shared by the webhook and the REST API."""

    def __init__(
        self,
        settings: BotSettings,
        adapter: Optional[BotFrameworkAdapter] = None
    ):
        self.settings = settings
        self.adapter = adapter or create_adapter(settings)
        self.state_store = ConversationStateStore()
        self.registry = ConversationReferenceRegistry()
        self.dispatcher = MessageDispatcher(self.state_store, self.registry)
        self.notifier = ProactiveNotifier(self.adapter, self.registry, settings.app_id)


__all__ = [
    'BotServices',
    'ConversationStateStore',
    'ConversationReferenceRegistry',
    'MessageDispatcher',
    'ProactiveNotifier',
]
