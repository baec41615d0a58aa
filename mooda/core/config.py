from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    DATABASE_URL: str = "postgresql://mooda:mooda@db:5432/mooda"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Comma-separated allowed origins, or "*" to allow all.
    # Example: "https://mooda.app,https://www.mooda.app"
    CORS_ORIGINS: str = "*"

    # Shared secret for the manual daily-analysis trigger.
    # Empty means the trigger endpoint is disabled.
    CRON_SECRET: str = ""

    GEMINI_API_KEY: str = ""
    GEMINI_API_URL: str = "https://generativelanguage.googleapis.com/v1beta/models"
    GEMINI_MODEL: str = "gemini-1.5-flash"
    LLM_TIMEOUT_SECONDS: float = 20.0

    # Every "calendar day" is computed in this fixed offset (KST = +9).
    REFERENCE_UTC_OFFSET_HOURS: int = 9

    SCHEDULER_ENABLED: bool = False
    SCHEDULER_HOUR: int = 0
    SCHEDULER_MINUTE: int = 5

    DEFAULT_PERSONALITY_ID: str = "friendly"

    @property
    def cors_origins_list(self) -> list[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
