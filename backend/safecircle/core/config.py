"""Application configuration."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "safecircle"
    debug: bool = False
    database_url: str = "sqlite:///./safecircle.db"
    web_origin: str = "http://localhost:3000"

    # JWT
    jwt_secret: str = "change-me-in-production-use-openssl-rand-hex-32"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60 * 24 * 7  # 7 days

    bcrypt_rounds: int = 12

    # Emails that get the admin role on sign-up
    admin_emails: list[str] = []

    search_result_limit: int = 20

    # When true only the alert owner and its snapshot members may resolve it
    restrict_alert_resolution: bool = False


settings = Settings()
