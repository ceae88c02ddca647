"""
Builds the storage and file-hosting adapters selected by settings.

Called once at application startup and by the CLI.
"""

import logging

from artfolio.core.config import Settings
from artfolio.domain.portfolio.ports import FileHostingPort, StorageGateway
from artfolio.infrastructure.portfolio.file_hosting import (
    HttpFileHostingAdapter,
    LocalFileHostingAdapter,
)
from artfolio.infrastructure.portfolio.memory_storage import InMemoryStorageAdapter
from artfolio.infrastructure.portfolio.sql_storage import SqlStorageAdapter
from artfolio.infrastructure.portfolio.table_store import TableStoreAdapter

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> StorageGateway:
    """Return the StorageGateway named by ``settings.storage_backend``.

    Raises:
        ValueError: If the selected backend is missing required settings.
    """
    backend = settings.storage_backend
    if backend == "memory":
        storage: StorageGateway = InMemoryStorageAdapter(
            seed_demo_user=settings.seed_demo_user
        )
    elif backend == "sql":
        storage = SqlStorageAdapter.from_url(
            settings.get_database_url(), echo=settings.sql_echo
        )
    elif backend == "table_store":
        if not settings.table_store_url or not settings.table_store_api_key:
            raise ValueError(
                "table_store backend requires TABLE_STORE_URL and TABLE_STORE_API_KEY"
            )
        storage = TableStoreAdapter(
            settings.table_store_url,
            settings.table_store_api_key,
            timeout=settings.table_store_timeout_seconds,
        )
    else:
        raise ValueError(f"Unknown storage backend: {backend}")

    logger.info("Using %s storage backend", storage.name)
    return storage


def build_file_host(settings: Settings) -> FileHostingPort:
    """Return the FileHostingPort named by ``settings.file_hosting_backend``."""
    if settings.file_hosting_backend == "http":
        if not settings.file_host_url:
            raise ValueError("http file hosting requires FILE_HOST_URL")
        return HttpFileHostingAdapter(
            settings.file_host_url,
            api_key=settings.file_host_api_key,
            timeout=settings.file_host_timeout_seconds,
        )
    return LocalFileHostingAdapter(settings.upload_dir, settings.public_upload_base_url)
