"""
In-memory conversation state store.

Holds one ConversationState per conversation id. State is volatile and is
lost on restart. Callers only ever receive copies; mutation goes through
increment() so concurrent handlers never lose updates.
"""
import logging
import threading
from typing import Dict, Optional

from proactive_bot.models.conversation import ConversationState

logger = logging.getLogger(__name__)


class ConversationStateStore:
    """Thread-safe map of conversation id to ConversationState."""

    def __init__(self):
        self._states: Dict[str, ConversationState] = {}
        self._lock = threading.Lock()

    def get(self, conversation_id: str) -> Optional[ConversationState]:
        with self._lock:
            state = self._states.get(conversation_id)
            return state.model_copy() if state is not None else None

    def get_or_init(self, conversation_id: str) -> ConversationState:
        """Return the stored state, creating it at count 0 if absent."""
        with self._lock:
            return self._get_or_init_locked(conversation_id).model_copy()

    def increment(self, conversation_id: str) -> ConversationState:
        """Atomically get-or-init the state and add one to its counter."""
        with self._lock:
            state = self._get_or_init_locked(conversation_id)
            state.count += 1
            return state.model_copy()

    def delete(self, conversation_id: str) -> None:
        with self._lock:
            removed = self._states.pop(conversation_id, None)
        if removed is not None:
            logger.info(f"Deleted state for conversation {conversation_id}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def _get_or_init_locked(self, conversation_id: str) -> ConversationState:
        state = self._states.get(conversation_id)
        if state is None:
            state = ConversationState()
            self._states[conversation_id] = state
            logger.debug(f"Initialized state for conversation {conversation_id}")
        return state
