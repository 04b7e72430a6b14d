"""Configuration for Mindlog document stores."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class StoreType(str, Enum):
    """Supported document store types."""

    MEMORY = "memory"
    JSON = "json"


class StoreConfig(BaseModel):
    """Configuration for the document store.

    Attributes:
        store_type: Which store implementation to use
        data_path: Path to the JSON data file (for the JSON store only)
    """

    store_type: StoreType = Field(
        default=StoreType.JSON,
        description="Document store type (memory or json)",
    )
    data_path: Path = Field(
        default=Path(".mindlog_data/mindlog.json"),
        description="Path to the JSON data file",
    )

    model_config = {"frozen": True}
