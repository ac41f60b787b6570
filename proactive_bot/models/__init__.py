"""Models for the Teams proactive bot."""

from proactive_bot.models.conversation import ConversationState
from proactive_bot.models.events import (
    InboundEvent,
    InstallEvent,
    MessageEvent,
    MalformedActivityError,
    parse_activity,
)
from proactive_bot.models.notify import (
    MentionTarget,
    NotifyRequest,
    NotifyResponse,
    ConversationSummary,
    ConversationListResponse,
)

__all__ = [
    'ConversationState',
    'InboundEvent', 'InstallEvent', 'MessageEvent', 'MalformedActivityError', 'parse_activity',
    'MentionTarget', 'NotifyRequest', 'NotifyResponse', 'ConversationSummary', 'ConversationListResponse',
]
