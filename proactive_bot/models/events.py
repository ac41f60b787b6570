"""
Inbound event models.

The Bot Framework Activity carries far more than the bot needs. parse_activity
narrows it to one of two explicit events at the webhook boundary:

- InstallEvent: the bot was installed into (or added to) a conversation
- MessageEvent: a user sent a message

Both carry the conversation reference needed for later proactive sends.
"""
from typing import Any, Dict, Literal, Optional

from botbuilder.core import TurnContext
from botbuilder.schema import Activity, ActivityTypes, ConversationReference
from pydantic import BaseModel, ConfigDict, Field

# installationUpdate actions that mean the app is now present in the conversation
INSTALL_ACTIONS = ("add", "add-upgrade")


class MalformedActivityError(ValueError):
    """Raised when an activity lacks the fields the bot depends on."""


class InboundEvent(BaseModel):
    """Fields shared by every event that refreshes the reference registry."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    conversation_id: str
    reference: ConversationReference


class InstallEvent(InboundEvent):
    kind: Literal["install"] = "install"


class MessageEvent(InboundEvent):
    kind: Literal["message"] = "message"
    text: str = ""
    activity: Dict[str, Any] = Field(default_factory=dict)


def _bot_was_added(activity: Activity) -> bool:
    """True when the bot itself appears in membersAdded of a conversationUpdate."""
    if not activity.members_added or activity.recipient is None:
        return False
    return any(member.id == activity.recipient.id for member in activity.members_added)


def parse_activity(activity: Activity) -> Optional[InboundEvent]:
    """
    Convert a Bot Framework activity into an InstallEvent or MessageEvent.

    Returns None for activity types the bot ignores (typing, reactions, ...).

    Raises:
        MalformedActivityError: if a relevant activity has no conversation id
    """
    if activity.type == ActivityTypes.message:
        kind = "message"
    elif activity.type == ActivityTypes.installation_update:
        if (activity.action or "").lower() not in INSTALL_ACTIONS:
            return None
        kind = "install"
    elif activity.type == ActivityTypes.conversation_update:
        if not _bot_was_added(activity):
            return None
        kind = "install"
    else:
        return None

    if activity.conversation is None or not activity.conversation.id:
        raise MalformedActivityError(f"{activity.type} activity has no conversation id")

    reference = TurnContext.get_conversation_reference(activity)
    conversation_id = activity.conversation.id

    if kind == "install":
        return InstallEvent(conversation_id=conversation_id, reference=reference)

    return MessageEvent(
        conversation_id=conversation_id,
        reference=reference,
        text=activity.text or "",
        activity=activity.serialize(),
    )
