# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    DATABASE_URL: str = Field(default="sqlite:///./tickets.db")
    APP_NAME: str = "Raffle Ticket Desk"
    APP_DESC: str = "Register, look up and edit raffle tickets 00001 to 20000"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # CORS origins, comma separated
    CORS_ORIGINS: str = "*"

    # Ticket numbers
    TICKET_NUMBER_MAX: int = 20000
    TICKET_NUMBER_WIDTH: int = 5

    # Confirmation string for the bulk delete (not an auth mechanism)
    ADMIN_PASSWORD: str = "admin"

    # careOf is mandatory when registering, optional when editing
    REGISTER_CARE_OF_REQUIRED: bool = True
    EDIT_CARE_OF_REQUIRED: bool = False

    # Pydantic v2 style config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
