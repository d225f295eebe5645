"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    environment: str = "development"
    debug: bool = False
    service_name: str = "clova-cek-service"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Extension paths
    application_id: str | None = None  # Registers api_path with signature verification
    api_path: str = "/api"
    debug_path: str | None = None  # Registers a path that skips verification
    verification_paths: dict[str, str] = {}  # path -> expected applicationId
    debug_paths: list[str] = []

    # Responses
    response_timeout: float | None = 10.0  # Seconds to wait for a handler's response

    class Config:
        env_prefix = "CEK_"
        case_sensitive = False


settings = Settings()
