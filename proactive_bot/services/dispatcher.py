"""
Message dispatcher for the Teams bot.

Every inbound event first refreshes the conversation reference registry.
Message events are then matched against a fixed command table on the
mention-stripped text (exact match, first wins); anything else is echoed
back with the conversation counter.
"""
import json
import logging
import platform
import re
import unicodedata
from importlib.metadata import PackageNotFoundError, version
from typing import Callable, Dict

from proactive_bot.models.events import InboundEvent, InstallEvent, MessageEvent
from proactive_bot.services.reference_registry import ConversationReferenceRegistry
from proactive_bot.services.state_store import ConversationStateStore

logger = logging.getLogger(__name__)

RESET_REPLY = "Ok I've deleted the current conversation state."

_MENTION_PATTERN = re.compile(r'<at>.*?</at>', flags=re.IGNORECASE)


def remove_mention_text(text: str) -> str:
    """
    Remove mention markup from message text.

    Teams includes mentions as <at>BotName</at> in the text. This strips
    them out to get the actual command.
    """
    if not text:
        return ""

    return _MENTION_PATTERN.sub('', text).strip()


def normalize_command_text(text: str) -> str:
    """Normalize Teams message text for reliable command matching."""
    if not text:
        return ""

    normalized = unicodedata.normalize("NFKC", text)

    # Remove zero-width and formatting characters that can appear in Teams inputs
    normalized = "".join(
        ch for ch in normalized
        if unicodedata.category(ch) != "Cf"
    )

    return " ".join(normalized.split())


def runtime_info() -> Dict[str, str]:
    try:
        sdk_version = version("botbuilder-core")
    except PackageNotFoundError:
        sdk_version = "unknown"
    return {
        "pythonversion": platform.python_version(),
        "sdkversion": sdk_version,
    }


class MessageDispatcher:
    """Routes inbound events to command handlers and produces reply text."""

    def __init__(
        self,
        state_store: ConversationStateStore,
        registry: ConversationReferenceRegistry
    ):
        self.state_store = state_store
        self.registry = registry
        self._commands: Dict[str, Callable[[MessageEvent], str]] = {
            "/reset": self._reset,
            "/count": self._count,
            "/diag": self._diag,
            "/state": self._state,
            "/runtime": self._runtime,
        }

    def remember(self, event: InboundEvent) -> None:
        """Upsert the conversation reference carried by an inbound event."""
        self.registry.put(event.conversation_id, event.reference)

    def handle_install(self, event: InstallEvent) -> None:
        """Bot was installed or added: cache the reference, send nothing."""
        logger.info(f"Bot installed in conversation {event.conversation_id}")
        self.remember(event)

    def handle_message(self, event: MessageEvent) -> str:
        """
        Handle a message event and return the reply text.

        Args:
            event: Parsed message event

        Returns:
            Reply to send back into the conversation
        """
        logger.info(f"Message received in conversation {event.conversation_id}")
        self.remember(event)

        text = remove_mention_text(event.text)
        command = normalize_command_text(text)

        handler = self._commands.get(command)
        if handler is not None:
            logger.info(f"Processing command {command} for conversation {event.conversation_id}")
            return handler(event)

        return self._echo(event, text)

    def _reset(self, event: MessageEvent) -> str:
        self.state_store.delete(event.conversation_id)
        return RESET_REPLY

    def _count(self, event: MessageEvent) -> str:
        state = self.state_store.get_or_init(event.conversation_id)
        return f"The count is {state.count}"

    def _diag(self, event: MessageEvent) -> str:
        return json.dumps(event.activity)

    def _state(self, event: MessageEvent) -> str:
        state = self.state_store.get_or_init(event.conversation_id)
        return state.model_dump_json()

    def _runtime(self, event: MessageEvent) -> str:
        return json.dumps(runtime_info())

    def _echo(self, event: MessageEvent, text: str) -> str:
        state = self.state_store.increment(event.conversation_id)
        return f"[{state.count}] you said: {text}"
