"""
Environment configuration for the Teams proactive bot.
Set in .env.local or environment variables.

Bot credentials:
- MICROSOFT_APP_TYPE: MultiTenant | SingleTenant | UserAssignedMsi
  Default: MultiTenant
- MICROSOFT_APP_ID / CLIENT_ID: Bot app registration (or managed identity client) ID
- MICROSOFT_APP_PASSWORD: Client secret (not used for UserAssignedMsi)
- MICROSOFT_APP_TENANT_ID: Tenant for SingleTenant and UserAssignedMsi bots

Runtime:
- LOG_LEVEL: Logging level (default INFO)
- DEBUG: Expose exception details in 500 responses (default false)
- PORT: Listening port for uvicorn (default 3978)
- CORS_ORIGINS: Comma separated list of allowed origins (default *)
"""
import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv('.env.local')

APP_TYPE_MULTI_TENANT = "MultiTenant"
APP_TYPE_SINGLE_TENANT = "SingleTenant"
APP_TYPE_USER_ASSIGNED_MSI = "UserAssignedMsi"


class BotSettings(BaseModel):
    """Runtime settings for the bot service."""
    app_type: str = APP_TYPE_MULTI_TENANT
    app_id: Optional[str] = None
    app_password: Optional[str] = None
    tenant_id: Optional[str] = None
    log_level: str = "INFO"
    debug: bool = False
    port: int = 3978
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @property
    def uses_managed_identity(self) -> bool:
        return self.app_type == APP_TYPE_USER_ASSIGNED_MSI

    @classmethod
    def from_env(cls) -> "BotSettings":
        """Build settings from the process environment."""
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            app_type=os.getenv("MICROSOFT_APP_TYPE", APP_TYPE_MULTI_TENANT),
            app_id=os.getenv("MICROSOFT_APP_ID") or os.getenv("CLIENT_ID") or None,
            app_password=os.getenv("MICROSOFT_APP_PASSWORD") or None,
            tenant_id=os.getenv("MICROSOFT_APP_TENANT_ID") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            port=int(os.getenv("PORT", "3978")),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )
