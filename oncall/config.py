"""Application configuration settings."""

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Credentials are optional at load time. The component that needs one
    raises ConfigurationError the first time it is built without it.
    """

    # Application
    APP_NAME: str = "oncall"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000

    # OpenAI
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_MOCKUP_MODEL: str = "gpt-4o"
    OPENAI_MAX_RETRIES: int = 0
    OPENAI_TIMEOUT: int = 60

    # Session cookies
    SESSION_SECRET: Optional[str] = None
    PUBLIC_ORIGIN: Optional[str] = None

    # Linear
    LINEAR_OAUTH_CLIENT_ID: Optional[str] = None
    LINEAR_OAUTH_CLIENT_SECRET: Optional[str] = None
    LINEAR_OAUTH_SCOPE: str = "read,issues:create"
    LINEAR_OAUTH_REDIRECT_PATH: str = "/auth/linear/callback"
    LINEAR_TEAM_ID: Optional[str] = None
    LINEAR_API_TIMEOUT: int = 30

    # ElevenLabs
    ELEVENLABS_API_KEY: Optional[str] = None
    ELEVENLABS_AGENT_ID: Optional[str] = None

    # Intent pipeline
    INTENT_DEBOUNCE_MS: int = 800
    INTENT_DISPLAY_THRESHOLD: float = 0.6
    INTENT_TICKET_THRESHOLD: float = 0.7

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


# Global settings instance
settings = Settings()
