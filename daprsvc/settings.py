from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DAPRSVC_", env_file=".env", extra="ignore")

    # Service
    SERVICE_NAME: str = Field(default="daprsvc")
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8080)
    LOG_LEVEL: str = Field(default="INFO")
    REQUEST_LOGGING: bool = Field(default=True)

    # Pub/sub surface (the sidecar calls these)
    SUBSCRIBE_PATH: str = Field(default="/dapr/subscribe")
    MESSAGE_ROUTE_PREFIX: str = Field(default="/message")

    # Service invocation detection
    CALLER_HEADER: str = Field(default="dapr-caller-app-id")
    CALLEE_HEADER: str = Field(default="dapr-callee-app-id")
    INVOCATION_MARKER_HEADER: str = Field(default="X-Daprsvc-Invocation")

    @property
    def invocation_headers(self) -> tuple[str, str]:
        return (self.CALLER_HEADER.lower(), self.CALLEE_HEADER.lower())


settings = Settings()
