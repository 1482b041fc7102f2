"""FastAPI dependencies for dependency injection."""

import asyncio
import os
from functools import lru_cache

from fastapi import Depends

from taleleaf.config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    StorageConfig,
    apply_env_overrides,
    load_config,
)
from taleleaf.llm.base import BaseLLM
from taleleaf.llm.factory import create_llm
from taleleaf.retrieval.assembler import ContextWindowAssembler
from taleleaf.retrieval.service import ContextWindowService
from taleleaf.storage.base import BookContextStore
from taleleaf.storage.memory import InMemoryBookStore
from taleleaf.storage.postgres import PostgresBookStore


@lru_cache
def get_config() -> AppConfig:
    """Load ``TALELEAF_CONFIG`` (or the packaged config.yaml) plus environment."""
    path = os.getenv("TALELEAF_CONFIG") or DEFAULT_CONFIG_PATH
    return apply_env_overrides(load_config(path))


# ========== Store Dependency ==========

_store_instance: BookContextStore | None = None
_store_lock: asyncio.Lock | None = None


async def _open_store(storage: StorageConfig) -> BookContextStore:
    if storage.backend == "memory":
        if not storage.data_file:
            raise ValueError("storage.data_file is required for the memory backend")
        return InMemoryBookStore.from_json_file(storage.data_file)
    if storage.backend == "postgres":
        if not storage.database_url:
            raise ValueError("DATABASE_URL is not set")
        store = PostgresBookStore(
            database_url=storage.database_url,
            min_size=storage.pool_min_size,
            max_size=storage.pool_max_size,
        )
        await store.initialize()
        return store
    raise ValueError(f"Unsupported storage backend: {storage.backend}")


async def get_store(config: AppConfig = Depends(get_config)) -> BookContextStore:
    """Get the shared book context store, creating it on first use.

    Creation is serialised so concurrent first requests share one store.
    """
    global _store_instance, _store_lock

    if _store_instance is not None:
        return _store_instance

    if _store_lock is None:
        _store_lock = asyncio.Lock()

    async with _store_lock:
        if _store_instance is None:
            _store_instance = await _open_store(config.storage)

    return _store_instance


async def close_store() -> None:
    global _store_instance, _store_lock

    if _store_instance is not None:
        await _store_instance.close()
        _store_instance = None
    _store_lock = None


# ========== LLM Dependency ==========

_llm_instance: BaseLLM | None = None


def get_llm(config: AppConfig = Depends(get_config)) -> BaseLLM:
    """Get cached LLM instance."""
    global _llm_instance

    if _llm_instance is None:
        _llm_instance = create_llm(config.llm)
    return _llm_instance


# ========== Retrieval ==========


def get_context_service(
    store: BookContextStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> ContextWindowService:
    return ContextWindowService(ContextWindowAssembler(store, config.context_window))
