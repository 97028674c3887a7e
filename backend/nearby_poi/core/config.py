from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Overpass backend
    OVERPASS_URL: str = "https://overpass-api.de/api/interpreter"
    OVERPASS_QUERY_TIMEOUT: int = 15  # server-side [timeout:] in the query header
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    USER_AGENT: str = "nearby-poi/1.0"

    # Cache & rate limiting
    CACHE_TTL_MINUTES: int = 15
    GRID_SIZE_METERS: int = 500
    MIN_REQUEST_INTERVAL_SECONDS: float = 1.0

    # Search defaults
    DEFAULT_RADIUS_METERS: int = 1000
    DEFAULT_SEARCH_RADIUS_METERS: int = 2000
    DEFAULT_LIMIT: int = 20
    MAX_RADIUS_METERS: int = 10000

    # Logging
    LOGGER: int = 20
    LOG_TO_FILE: bool = True
    LOG_DIRECTORY: str = "logs"

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

settings = Settings()
