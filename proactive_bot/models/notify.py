"""Request and response schemas for the proactive messaging API."""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MentionTarget(BaseModel):
    """User to @-mention; the message text must contain <at>name</at>."""
    id: str
    name: str


class NotifyRequest(BaseModel):
    """Body of POST /api/notify."""
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: Optional[str] = Field(default=None, alias="conversationId")
    message: Optional[str] = None
    reply_to_id: Optional[str] = Field(default=None, alias="replyToId")
    mentions: Optional[List[MentionTarget]] = None

    @field_validator('mentions', mode='before')
    @classmethod
    def ignore_non_list_mentions(cls, v: Any) -> Any:
        """A mentions value that is not a list is ignored rather than rejected."""
        if not isinstance(v, list):
            return None
        return v


class NotifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = "sent"
    activity_id: str = Field(alias="activityId")


class ConversationSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    conversation_type: Optional[str] = Field(default=None, alias="conversationType")
    service_url: Optional[str] = Field(default=None, alias="serviceUrl")


class ConversationListResponse(BaseModel):
    conversations: List[ConversationSummary] = Field(default_factory=list)
