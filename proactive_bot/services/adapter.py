"""
Bot Framework adapter setup.

MICROSOFT_APP_TYPE selects how the bot authenticates to the channel:
- MultiTenant / SingleTenant: app id + client secret
- UserAssignedMsi: tokens from a user-assigned managed identity via azure-identity
"""
import logging
from typing import Optional

from azure.identity import ManagedIdentityCredential
from botbuilder.core import BotFrameworkAdapter, BotFrameworkAdapterSettings, TurnContext
from botframework.connector.auth import AppCredentials, AuthenticationConstants

from proactive_bot.config import APP_TYPE_SINGLE_TENANT, BotSettings

logger = logging.getLogger(__name__)


class ManagedIdentityBotCredentials(AppCredentials):
    """AppCredentials backed by a user-assigned managed identity."""

    def __init__(
        self,
        client_id: str,
        tenant_id: Optional[str] = None,
        oauth_scope: Optional[str] = None,
        credential: Optional[ManagedIdentityCredential] = None
    ):
        super().__init__(
            app_id=client_id,
            channel_auth_tenant=tenant_id,
            oauth_scope=oauth_scope or AuthenticationConstants.TO_CHANNEL_FROM_BOT_OAUTH_SCOPE
        )
        self.tenant_id = tenant_id
        self.credential = credential or ManagedIdentityCredential(client_id=client_id)

    def get_access_token(self, force_refresh: bool = False) -> str:
        scope = self.oauth_scope
        if not scope.endswith("/.default"):
            scope = f"{scope}/.default"
        if self.tenant_id:
            return self.credential.get_token(scope, tenant_id=self.tenant_id).token
        return self.credential.get_token(scope).token


def create_adapter_settings(settings: BotSettings) -> BotFrameworkAdapterSettings:
    if settings.uses_managed_identity:
        if not settings.app_id:
            raise ValueError(
                "CLIENT_ID (or MICROSOFT_APP_ID) is required when MICROSOFT_APP_TYPE=UserAssignedMsi"
            )
        logger.info(f"Using managed identity credentials for client {settings.app_id}")
        return BotFrameworkAdapterSettings(
            app_id=settings.app_id,
            channel_auth_tenant=settings.tenant_id,
            app_credentials=ManagedIdentityBotCredentials(settings.app_id, settings.tenant_id)
        )

    # Tenant ID only applies to SingleTenant apps
    channel_auth_tenant = settings.tenant_id if settings.app_type == APP_TYPE_SINGLE_TENANT else None
    return BotFrameworkAdapterSettings(
        app_id=settings.app_id or "",
        app_password=settings.app_password or "",
        channel_auth_tenant=channel_auth_tenant
    )


async def on_turn_error(turn_context: TurnContext, error: Exception):
    """Last-chance handler for errors that escape a turn."""
    activity = turn_context.activity
    conversation_id = activity.conversation.id if activity and activity.conversation else None
    logger.error(
        f"Unhandled error in turn for conversation {conversation_id}: {error}",
        exc_info=error
    )


def create_adapter(settings: BotSettings) -> BotFrameworkAdapter:
    """Build the Bot Framework adapter for the configured credential mode."""
    adapter = BotFrameworkAdapter(create_adapter_settings(settings))
    adapter.on_turn_error = on_turn_error
    logger.info(f"Bot Framework adapter created (app_type={settings.app_type})")
    return adapter
