from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    OSRM_BASE_URL: str = "https://router.project-osrm.org"
    OSRM_DRIVING_PROFILE: str = "driving"
    OSRM_WALKING_PROFILE: str = "foot"

    GOOGLE_MAPS_API_KEY: str | None = None
    TRANSIT_DIRECTIONS_URL: str = "https://maps.googleapis.com/maps/api/directions/json"

    ROUTING_REQUEST_TIMEOUT: float = 30.0
    ROUTING_MAX_ATTEMPTS: int = 1

    REDIS_URL: str | None = None
    ROUTING_CACHE_TTL_SECONDS: int = 3600

    LOG_LEVEL: str = "INFO"


settings = Settings()
