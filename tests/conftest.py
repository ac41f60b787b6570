#!/usr/bin/env python3
"""
Shared pytest configuration and fixtures for the Teams proactive bot tests.
Provides activity builders, a mocked Bot Framework adapter and a test client.
"""

import os
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from botbuilder.schema import (
    Activity,
    ActivityTypes,
    ChannelAccount,
    ConversationAccount,
    ResourceResponse,
)
from fastapi.testclient import TestClient

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from proactive_bot.config import BotSettings
from proactive_bot.main import create_app
from proactive_bot.services import BotServices

SERVICE_URL = "https://smba.trafficmanager.net/amer/"
TENANT_ID = "test-tenant-789"
BOT_ID = "28:test-bot-id"
PROACTIVE_ACTIVITY_ID = "1700000000000"


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "asyncio: mark test as async"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )


def make_activity(
    text: str = "hello",
    conversation_id: str = "c1",
    activity_type: str = ActivityTypes.message,
    conversation_type: str = "personal",
    service_url: str = SERVICE_URL,
    **kwargs
) -> Activity:
    """Build a Teams activity as the channel would deliver it."""
    return Activity(
        type=activity_type,
        id="activity-in-1",
        channel_id="msteams",
        service_url=service_url,
        text=text if activity_type == ActivityTypes.message else None,
        conversation=ConversationAccount(
            id=conversation_id,
            conversation_type=conversation_type,
            tenant_id=TENANT_ID
        ),
        from_property=ChannelAccount(id="29:test-user-456", name="Test User"),
        recipient=ChannelAccount(id=BOT_ID, name="ProactiveBot"),
        **kwargs
    )


def make_activity_payload(text: str = "hello", conversation_id: str = "c1", **extra) -> dict:
    """JSON body of a message activity as posted to the webhook."""
    payload = {
        "type": "message",
        "id": "activity-in-1",
        "channelId": "msteams",
        "serviceUrl": SERVICE_URL,
        "text": text,
        "from": {"id": "29:test-user-456", "name": "Test User"},
        "recipient": {"id": BOT_ID, "name": "ProactiveBot"},
        "conversation": {
            "id": conversation_id,
            "conversationType": "personal",
            "tenantId": TENANT_ID
        },
    }
    payload.update(extra)
    return payload


@pytest.fixture
def activity_factory():
    """Provide the activity builder to tests."""
    return make_activity


@pytest.fixture
def payload_factory():
    """Provide the webhook payload builder to tests."""
    return make_activity_payload


@pytest.fixture
def mock_adapter():
    """
    Mock Bot Framework adapter.

    - process_activity runs the bot logic against a mock turn context whose
      send_activity is adapter.reply_sender
    - continue_conversation runs the callback against adapter.proactive_turn_context
    """
    adapter = MagicMock()

    adapter.reply_sender = AsyncMock(return_value=ResourceResponse(id="reply-1"))

    async def process_activity(activity, auth_header, logic):
        turn_context = MagicMock()
        turn_context.activity = activity
        turn_context.send_activity = adapter.reply_sender
        await logic(turn_context)
        return None

    adapter.process_activity = AsyncMock(side_effect=process_activity)

    proactive_turn_context = MagicMock()
    proactive_turn_context.send_activity = AsyncMock(
        return_value=ResourceResponse(id=PROACTIVE_ACTIVITY_ID)
    )
    adapter.proactive_turn_context = proactive_turn_context

    async def continue_conversation(reference, callback, bot_id=None, claims_identity=None, audience=None):
        # Same precondition as BotFrameworkAdapter.continue_conversation
        if not bot_id and not claims_identity:
            raise TypeError("Expected bot_id or claims_identity")
        await callback(proactive_turn_context)

    adapter.continue_conversation = AsyncMock(side_effect=continue_conversation)
    return adapter


@pytest.fixture
def settings():
    """Settings with authentication disabled (no app id)."""
    return BotSettings()


@pytest.fixture
def services(settings, mock_adapter):
    """Bot services wired to the mock adapter."""
    return BotServices(settings, adapter=mock_adapter)


@pytest.fixture(autouse=True)
def mock_trust_service_url():
    """Avoid touching the connector's trusted host list."""
    with patch('proactive_bot.services.proactive_messaging.MicrosoftAppCredentials') as mock_credentials:
        yield mock_credentials


@pytest.fixture
def client(services):
    """FastAPI test client for the bot app."""
    return TestClient(create_app(services=services))


@pytest.fixture
def sent_replies(mock_adapter):
    """Callable listing reply texts sent through the mock adapter, in order."""
    def _replies():
        return [call.args[0].text for call in mock_adapter.reply_sender.call_args_list]
    return _replies
