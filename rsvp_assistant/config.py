from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Security: Read from .env, never hardcode keys here.
    # Leaving the key unset means intent recognition is "not configured".
    OPENAI_API_KEY: str | None = None
    OPENAI_MODEL: str = "gpt-4o"

    # Generation Parameters
    LLM_TEMPERATURE: float = 0.0

    # Classifications below this confidence are treated as "not understood"
    CONFIDENCE_THRESHOLD: float = 0.5

    # Database Configuration (in-memory repositories when unset)
    DATABASE_URL: str | None = None

    # Notification delivery (log-only when unset)
    NOTIFY_WEBHOOK_URL: str | None = None
    NOTIFY_TIMEOUT_SECONDS: float = 10.0

    # Event content used in replies and notifications
    EVENT_NAME: str = "company's Symposium 2020"
    EVENT_DETAILS: str = (
        "company's Symposium 2020 will be held on Wednesday, April 8th 2020 "
        "from 12:30pm to 5pm.\n"
        "Location: Bethesda North Marriott Hotel & Conference Center, "
        "5701 Marinelli Road, Rockville, Maryland 20852. See you there!"
    )
    ATTENDEES_URL: str = "https://companysymp2020.azurewebsites.net/attendees"
    CALENDAR_URL: str = (
        "https://symposiumfiles.blob.core.windows.net/calendar/company_Symposium_2020.ics"
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Loads from a .env file in the root directory
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def nlu_configured(self) -> bool:
        return bool(self.OPENAI_API_KEY)

# Singleton instance
settings = Settings()
