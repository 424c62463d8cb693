from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read from OS env and optional .env file in project root.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(3333, alias="PORT")

    # OpenAI-compatible chat completions backend.
    openai_api_key: Optional[str] = Field(
        default=None,
        alias="OPENAI_API_KEY",
        description="Bearer token sent to the chat completions backend",
    )
    openai_base_url: str = Field(
        "https://api.openai.com/v1",
        alias="OPENAI_BASE_URL",
        description="Base URL of the backend; '/chat/completions' is appended",
    )
    openai_model: str = Field("gpt-4.1-nano", alias="OPENAI_MODEL")
    openai_max_tokens: int = Field(2000, alias="OPENAI_MAX_TOKENS")

    # HTTP timeouts
    upstream_timeout: float = Field(60.0, alias="UPSTREAM_TIMEOUT")

    # Session defaults and expiry.
    default_system_prompt: str = Field(
        "You are a helpful and friendly assistant.",
        alias="DEFAULT_SYSTEM_PROMPT",
    )
    default_temperature: float = Field(
        0.5, alias="DEFAULT_TEMPERATURE", ge=0.0, le=2.0
    )
    session_inactivity_minutes: float = Field(
        30.0,
        alias="SESSION_INACTIVITY_MINUTES",
        description="Sessions idle for longer than this are evicted",
    )
    session_sweep_interval_seconds: float = Field(
        300.0,
        alias="SESSION_SWEEP_INTERVAL_SECONDS",
        description="Period of the expiry sweep",
    )

    cors_allow_origins: str = Field(
        "*",
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of allowed origins, '*' for any",
    )
    enable_api_docs: bool = Field(True, alias="ENABLE_API_DOCS")

    # Application log level for our chatsession logger.
    # Can be overridden via LOG_LEVEL env var, e.g. "DEBUG" while debugging.
    log_level: str = Field(
        "INFO",
        alias="LOG_LEVEL",
        description="Application log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_timezone: Optional[str] = Field(
        default=None,
        alias="LOG_TIMEZONE",
        description="Timezone name for log timestamps, e.g. 'America/Sao_Paulo'. Defaults to system local time.",
    )

    def get_cors_origins(self) -> List[str]:
        """
        Return configured CORS origins.
        Whitespace is stripped and empty entries are ignored.
        """
        if not self.cors_allow_origins or self.cors_allow_origins.strip() == "*":
            return ["*"]
        return [
            item.strip()
            for item in self.cors_allow_origins.split(",")
            if item.strip()
        ]


settings = Settings()  # Reads from environment if available
