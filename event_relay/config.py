"""Application configuration via pydantic-settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # App
    debug: bool = False
    # Browser origins allowed by CORS; none by default
    allowed_origins: list[str] = []
    # API key (optional): if set, required on sink/subscription routes
    api_key: str = ""

    # Twilio
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_sink_description: str = "Event relay webhook sink"
    twilio_events_api_url: str = "https://events.twilio.com/v1"

    # Public base URL Twilio delivers events to (e.g. an ngrok tunnel)
    ngrok_url: str = ""

    page_size: int = 20
    http_timeout: float = 30.0

    # Event log
    log_file: str = "data/logs/app.log"
    log_level: str = "DEBUG"

    @property
    def twilio_configured(self) -> bool:
        return bool(self.twilio_account_sid and self.twilio_auth_token)


settings = Settings()
