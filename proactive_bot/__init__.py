"""
Teams Proactive Bot - Microsoft Teams conversational bot with proactive messaging.

Provides:
- Bot Framework webhook handling (message, installationUpdate, conversationUpdate)
- Per-conversation counter state and slash commands (/reset, /count, /diag, /state, /runtime)
- Conversation reference caching for proactive delivery
- REST API for pushing messages (optionally threaded, with @-mentions) into known conversations
"""

__version__ = "1.0.0"
