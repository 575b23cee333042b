from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PATH = Path(__file__).resolve().parent.parent / ".env.local"


class Settings(BaseSettings):
    # Logging
    LOG_LEVEL: str = "INFO"

    # Google OAuth credentials
    GOOGLE_CONTACTS_TOKEN: str | None = None
    GOOGLE_REFRESH_TOKEN: str | None = None
    GOOGLE_CLIENT_ID: str | None = None
    GOOGLE_CLIENT_SECRET: str | None = None

    # =================================================================
    # CONTACTS FEED SETTINGS
    # =================================================================
    CONTACTS_HOST: str = "www.google.com"
    CONTACTS_THIN: bool = True
    CONTACTS_ACCOUNT: str = "default"
    CONTACTS_MAX_RESULTS: int = 10000
    CONTACTS_AUTH_SCHEME: str = "OAuth"
    REQUEST_TIMEOUT: float = 30.0  # seconds

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def contacts_base_url(self) -> str:
        """Scheme and host every feed path is resolved against."""
        return f"https://{self.CONTACTS_HOST.rstrip('/')}"


settings = Settings()
