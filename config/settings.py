from pydantic_settings import BaseSettings, SettingsConfigDict


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
class Settings(BaseSettings):
    """
    Application settings managed by Pydantic.
    Reads from environment variables and/or .env file.
    """
    # Project Info
    ENVIRONMENT: str = "production"
    LOG_LEVEL: str = "INFO"

    CORS_ALLOW_ORIGINS: list[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    # Link injection
    LINKS_PROPERTY: str = "links"       # property that receives injected links
    ARRAY_WILDCARD: str = "[]"          # path segment meaning "every element"
    DEFAULT_LINK_STATUS: int = 200      # status a link is gated on unless told otherwise

    # Config to read from .env file if available
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
        )

settings = Settings()
