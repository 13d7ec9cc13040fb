# sharewith/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    # Listener
    HOST: str = "0.0.0.0"
    PORT: int = Field(default=8080, ge=0, le=65535)

    # Keep-alive
    HEARTBEAT_INTERVAL: float = Field(default=60.0, gt=0)  # seconds

    # WebSocket
    CLOSE_TIMEOUT: float = 2.0       # seconds allowed for a closing handshake
    MAX_FRAME_SIZE: int = 2**20      # bytes
    SEND_TIMEOUT: float = Field(default=5.0, gt=0)  # seconds a slow reader may hold up a send

    # Identity
    COOKIE_NAME: str = "peerid"
    TRUST_FORWARDED_FOR: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


settings = Settings()
