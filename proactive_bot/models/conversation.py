"""Per-conversation state kept by the bot."""
from pydantic import BaseModel, Field


class ConversationState(BaseModel):
    """Counter incremented by every non-command message in a conversation."""
    count: int = Field(default=0, ge=0)
