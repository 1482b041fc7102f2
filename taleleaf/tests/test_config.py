"""Tests for configuration loading."""

import json
from unittest.mock import patch

import pytest

from taleleaf.config import (
    AppConfig,
    DEFAULT_CONFIG_PATH,
    LLMConfig,
    StorageConfig,
    apply_env_overrides,
    load_config,
)


class TestLoadConfig:
    def test_none_gives_defaults(self):
        config = load_config(None)

        assert config == AppConfig()
        assert config.context_window.max_context_tokens == 1800
        assert config.context_window.page_focused_max_tokens == 900
        assert config.context_window.chunk_fetch_limit == 200

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml")

    def test_yaml_overrides_merge_with_defaults(self, tmp_path):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text(
            """
context_window:
  max_context_tokens: 1200
storage:
  backend: memory
  data_file: books.json
""",
            encoding="utf-8",
        )

        config = load_config(cfg)

        assert config.context_window.max_context_tokens == 1200
        assert config.context_window.desired_k_max == 8
        assert config.storage.backend == "memory"
        assert config.storage.data_file == "books.json"
        assert config.llm.model == "gemini-2.5-flash"

    def test_json_config(self, tmp_path):
        cfg = tmp_path / "cfg.json"
        cfg.write_text(json.dumps({"api": {"port": 9000}}), encoding="utf-8")

        assert load_config(cfg).api.port == 9000

    def test_env_references_are_expanded(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TL_TEST_DB", "postgresql://db/books")
        monkeypatch.delenv("TL_TEST_LEVEL", raising=False)
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text(
            """
storage:
  database_url: ${TL_TEST_DB:-postgresql://localhost/x}
logging:
  level: ${TL_TEST_LEVEL:-WARNING}
""",
            encoding="utf-8",
        )

        config = load_config(cfg)

        assert config.storage.database_url == "postgresql://db/books"
        assert config.logging.level == "WARNING"

    def test_unknown_key_is_rejected(self, tmp_path):
        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("context_window:\n  bogus: 1\n", encoding="utf-8")

        with pytest.raises(TypeError):
            load_config(cfg)

    def test_shipped_config_loads(self, monkeypatch):
        monkeypatch.delenv("TALELEAF_STORAGE", raising=False)
        monkeypatch.delenv("TALELEAF_LOG_LEVEL", raising=False)
        config = load_config(DEFAULT_CONFIG_PATH)

        assert config.storage.backend == "postgres"
        assert config.logging.level == "INFO"
        assert config.context_window.max_paragraph_chars == 900


class TestEnvOverrides:
    def test_fills_unset_secrets(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://env/db")
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.delenv("TALELEAF_LOG_LEVEL", raising=False)

        config = apply_env_overrides(AppConfig())

        assert config.storage.database_url == "postgresql://env/db"
        assert config.llm.api_key == "env-key"

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "postgresql://env/db")
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        base = AppConfig(
            storage=StorageConfig(database_url="postgresql://file/db"),
            llm=LLMConfig(api_key="file-key"),
        )

        config = apply_env_overrides(base)

        assert config.storage.database_url == "postgresql://file/db"
        assert config.llm.api_key == "file-key"

    def test_log_level_is_uppercased(self, monkeypatch):
        monkeypatch.setenv("TALELEAF_LOG_LEVEL", "debug")

        assert apply_env_overrides(AppConfig()).logging.level == "DEBUG"



class TestDefaultConfig:
    def test_packaged_config_ships_with_the_package(self):
        assert DEFAULT_CONFIG_PATH.name == "config.yaml"
        assert DEFAULT_CONFIG_PATH.parent.name == "taleleaf"
        assert DEFAULT_CONFIG_PATH.exists()

    def test_api_loads_packaged_config_without_env(self, monkeypatch):
        from taleleaf.api import dependencies

        monkeypatch.delenv("TALELEAF_CONFIG", raising=False)
        monkeypatch.delenv("TALELEAF_STORAGE", raising=False)
        dependencies.get_config.cache_clear()
        try:
            with patch("taleleaf.api.dependencies.load_config", wraps=load_config) as spy:
                config = dependencies.get_config()
        finally:
            dependencies.get_config.cache_clear()

        spy.assert_called_once_with(DEFAULT_CONFIG_PATH)
        assert config.storage.backend == "postgres"

    def test_api_prefers_env_config(self, monkeypatch, tmp_path):
        from taleleaf.api import dependencies

        cfg = tmp_path / "cfg.yaml"
        cfg.write_text("storage:\n  backend: memory\n", encoding="utf-8")
        monkeypatch.setenv("TALELEAF_CONFIG", str(cfg))
        dependencies.get_config.cache_clear()
        try:
            config = dependencies.get_config()
        finally:
            dependencies.get_config.cache_clear()

        assert config.storage.backend == "memory"
