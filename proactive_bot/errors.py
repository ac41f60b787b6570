"""
Exceptions raised by the proactive messaging surface.

Each error knows the HTTP status it maps to and how to render itself as a
JSON body; see error_handlers.register_error_handlers.
"""
from typing import Any, Dict, List, Optional


class ProactiveBotError(Exception):
    """Base class for errors reported to API callers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> Dict[str, Any]:
        return {"error": self.message}


class NotifyValidationError(ProactiveBotError):
    """A required request field is missing."""
    status_code = 400


class ConversationNotFoundError(ProactiveBotError):
    """No conversation reference is cached for the requested conversation."""
    status_code = 404

    def __init__(self, message: str, known_conversations: Optional[List[str]] = None):
        super().__init__(message)
        self.known_conversations = list(known_conversations or [])

    def to_response(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "knownConversations": self.known_conversations,
        }


class DeliveryError(ProactiveBotError):
    """The outbound send to the messaging channel failed."""
    status_code = 500
