"""
Proactive Messaging Service for Teams Bot Framework

This service sends messages into Teams conversations without an incoming
request, by replaying conversation references cached from earlier inbound
activities. Supports threaded replies in channels and @-mentions.
"""

import copy
import logging
import uuid
from typing import List, Optional

from botbuilder.core import BotFrameworkAdapter, MessageFactory, TurnContext
from botbuilder.schema import Activity, ChannelAccount, ConversationReference, Mention
from botframework.connector.auth import ClaimsIdentity, MicrosoftAppCredentials

from proactive_bot.errors import (
    ConversationNotFoundError,
    DeliveryError,
    NotifyValidationError,
)
from proactive_bot.models.notify import (
    ConversationListResponse,
    ConversationSummary,
    MentionTarget,
    NotifyRequest,
)
from proactive_bot.services.reference_registry import ConversationReferenceRegistry

logger = logging.getLogger(__name__)

THREAD_ID_DELIMITER = ";messageid="


def build_mention_entities(mentions: List[MentionTarget]) -> List[Mention]:
    """Create one mention entity per target, matching <at>name</at> in the text."""
    entities = []
    for target in mentions:
        mention = Mention(
            mentioned=ChannelAccount(id=target.id, name=target.name),
            text=f"<at>{target.name}</at>",
            type="mention"
        )
        entities.append(mention)
    return entities


def thread_reference(reference: ConversationReference, reply_to_id: str) -> ConversationReference:
    """
    Derive a reference that posts as a reply to a channel message.

    Teams threads replies by suffixing the conversation id with the id of the
    root message. The cached reference is left untouched.
    """
    conversation = copy.copy(reference.conversation)
    conversation.id = f"{reference.conversation.id}{THREAD_ID_DELIMITER}{reply_to_id}"

    threaded = copy.copy(reference)
    threaded.conversation = conversation
    return threaded


class ProactiveNotifier:
    """
    Service for sending proactive messages to known Teams conversations.

    Features:
    - Look up cached conversation references
    - Threaded replies via derived references
    - @-mention entities
    - Correlation ID tracking for debugging
    """

    def __init__(
        self,
        adapter: BotFrameworkAdapter,
        registry: ConversationReferenceRegistry,
        app_id: Optional[str] = None
    ):
        """
        Initialize the proactive notifier.

        Args:
            adapter: Bot Framework adapter used for continue_conversation
            registry: Registry of cached conversation references
            app_id: Microsoft App ID of the bot
        """
        self.adapter = adapter
        self.registry = registry
        self.app_id = app_id

    async def send(self, request: NotifyRequest) -> str:
        """
        Send a proactive message.

        Args:
            request: Target conversation, text, optional thread and mentions

        Returns:
            ID of the delivered activity

        Raises:
            NotifyValidationError: conversationId or message missing
            ConversationNotFoundError: no reference cached for the conversation
            DeliveryError: the channel rejected or failed the send
        """
        if not request.conversation_id or not request.message:
            raise NotifyValidationError("conversationId and message are required")

        reference = self.registry.get(request.conversation_id)
        if reference is None:
            raise ConversationNotFoundError(
                "Conversation not found. The bot must receive a message from this conversation first.",
                known_conversations=self.registry.list_known()
            )

        activity = MessageFactory.text(request.message)
        if request.mentions:
            activity.entities = build_mention_entities(request.mentions)

        if request.reply_to_id:
            reference = thread_reference(reference, request.reply_to_id)

        return await self._deliver(reference, activity)

    def list_conversations(self) -> ConversationListResponse:
        """Summaries of every cached reference, in registry order."""
        conversations = []
        for conversation_id, reference in self.registry.items():
            conversations.append(ConversationSummary(
                conversation_id=conversation_id,
                conversation_type=getattr(reference.conversation, "conversation_type", None),
                service_url=reference.service_url
            ))
        return ConversationListResponse(conversations=conversations)

    async def _deliver(self, reference: ConversationReference, activity: Activity) -> str:
        correlation_id = str(uuid.uuid4())
        conversation_id = reference.conversation.id if reference.conversation else None
        logger.info(
            f"[{correlation_id}] Sending proactive message to conversation {conversation_id} "
            f"via {reference.service_url}"
        )

        activity_id = None

        async def send_callback(turn_context: TurnContext):
            """Callback to send the message within the conversation context."""
            nonlocal activity_id
            response = await turn_context.send_activity(activity)
            activity_id = response.id if response else None

        try:
            # Trust the service URL
            MicrosoftAppCredentials.trust_service_url(reference.service_url)

            if self.app_id:
                await self.adapter.continue_conversation(
                    reference,
                    send_callback,
                    self.app_id
                )
            else:
                # Authentication disabled: continue with an anonymous identity
                await self.adapter.continue_conversation(
                    reference,
                    send_callback,
                    claims_identity=ClaimsIdentity({}, False)
                )
        except Exception as e:
            logger.error(
                f"[{correlation_id}] Failed to send proactive message: {e}",
                exc_info=True
            )
            raise DeliveryError(str(e) or "Failed to send message") from e

        logger.info(
            f"[{correlation_id}] Proactive message sent. Response ID: {activity_id}"
        )
        return activity_id or ""


__all__ = [
    'ProactiveNotifier',
    'build_mention_entities',
    'thread_reference',
]
