"""Document stores for Mindlog.

This module provides the document store interface, its implementations
and typed fetch results.
"""

from .base import DocumentStore
from .config import StoreConfig, StoreType
from .json_file import JSONFileDocumentStore
from .memory import InMemoryDocumentStore
from .results import FetchError, FetchOk, FetchResult, fetch_records

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "JSONFileDocumentStore",
    "StoreConfig",
    "StoreType",
    "FetchOk",
    "FetchError",
    "FetchResult",
    "fetch_records",
    "get_document_store",
]


def get_document_store(config: StoreConfig) -> DocumentStore:
    """Factory function to create a document store based on configuration.

    Args:
        config: Store configuration

    Returns:
        Document store instance

    Raises:
        ValueError: If the store type is not supported
    """
    if config.store_type == StoreType.MEMORY:
        return InMemoryDocumentStore()
    elif config.store_type == StoreType.JSON:
        return JSONFileDocumentStore(config.data_path)
    else:
        raise ValueError(f"Unsupported document store: {config.store_type}")
