"""
Conversation reference registry for Teams proactive messaging.

Every inbound message or install event overwrites the reference for its
conversation, so the registry is only as fresh as the last event seen.
Entries are never pruned; a stale reference surfaces as a delivery failure.
"""
import logging
import threading
from typing import Dict, List, Optional, Tuple

from botbuilder.schema import ConversationReference

logger = logging.getLogger(__name__)


class ConversationReferenceRegistry:
    """Thread-safe, insertion-ordered map of conversation id to reference."""

    def __init__(self):
        self._references: Dict[str, ConversationReference] = {}
        self._lock = threading.Lock()

    def put(self, conversation_id: str, reference: ConversationReference) -> None:
        """Store the reference, replacing any previous one."""
        with self._lock:
            self._references[conversation_id] = reference
        logger.info(f"Stored conversation reference for {conversation_id}")
        logger.debug(
            f"Reference for {conversation_id}: service_url={reference.service_url}, "
            f"channel_id={reference.channel_id}"
        )

    def get(self, conversation_id: str) -> Optional[ConversationReference]:
        with self._lock:
            return self._references.get(conversation_id)

    def list_known(self) -> List[str]:
        """Conversation ids in the order they were first seen."""
        with self._lock:
            return list(self._references.keys())

    def items(self) -> List[Tuple[str, ConversationReference]]:
        with self._lock:
            return list(self._references.items())

    def __len__(self) -> int:
        with self._lock:
            return len(self._references)
