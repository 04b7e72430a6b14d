"""Configuration for the Mindlog server.

This module defines the configuration model for the API server, including
document store and session settings.
"""

from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from mindlog.store import StoreConfig, StoreType


class ServerConfig(BaseModel):
    """Configuration for the API server.

    Attributes:
        host: Server host
        port: Server port
        store_type: Type of document store to use
        data_path: Path to the JSON data file (for the JSON store only)
        session_ttl_minutes: Lifetime of a session after sign-in
        cors_origins: Origins allowed to call the API from a browser
    """

    host: str = Field(
        default="127.0.0.1",
        description="Server host",
    )
    port: int = Field(
        default=8000,
        description="Server port",
        ge=1,
        le=65535,
    )
    store_type: StoreType = Field(
        default=StoreType.JSON,
        description="Document store type (memory or json)",
    )
    data_path: Path = Field(
        default=Path(".mindlog_data/mindlog.json"),
        description="Path to the JSON data file",
    )
    session_ttl_minutes: int = Field(
        default=12 * 60,
        description="Session lifetime in minutes",
        ge=1,
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    model_config = {"frozen": True}

    @property
    def session_ttl(self) -> timedelta:
        """Session lifetime as a timedelta."""
        return timedelta(minutes=self.session_ttl_minutes)

    def store_config(self) -> StoreConfig:
        """Build the document store configuration."""
        return StoreConfig(store_type=self.store_type, data_path=self.data_path)
