"""Tests for config.py: loading, env var expansion, validation."""

import logging

import pytest

from config import Config, BrowserConfig, DEFAULT_POPULAR_SEARCHES, expand_env_vars, load_config


class TestExpandEnvVars:
    def test_dollar_brace_syntax(self, monkeypatch):
        monkeypatch.setenv("TEST_VAR", "hello")
        assert expand_env_vars("${TEST_VAR}") == "hello"

    def test_dollar_prefix_syntax(self, monkeypatch):
        monkeypatch.setenv("MY_VAR", "world")
        assert expand_env_vars("$MY_VAR") == "world"

    def test_missing_var_becomes_empty(self, monkeypatch):
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)
        assert expand_env_vars("${NONEXISTENT_VAR}") == ""

    def test_nested_dict(self, monkeypatch):
        monkeypatch.setenv("API_HOST", "api.example")
        result = expand_env_vars({"api": {"base_url": "http://${API_HOST}"}})
        assert result == {"api": {"base_url": "http://api.example"}}

    def test_non_string_passthrough(self):
        assert expand_env_vars(42) == 42
        assert expand_env_vars(True) is True
        assert expand_env_vars(None) is None


class TestConfigFromYaml:
    def test_load_basic_yaml(self, config_yaml):
        cfg = Config.from_yaml(config_yaml)
        assert cfg.api.base_url == "http://api.local:8080"
        assert cfg.api.search_timeout == 15
        assert cfg.api.retries == 1
        assert cfg.browser.page_size == 24
        assert cfg.browser.default_sort == "title"
        assert cfg.browser.default_search_type == "stored"
        assert cfg.browser.popular_searches == ["cats", "dogs"]
        assert cfg.web.port == 8001

    def test_missing_sections_use_defaults(self, tmp_path):
        cfg_file = tmp_path / "partial.yaml"
        cfg_file.write_text("api:\n  base_url: http://x\n")
        cfg = Config.from_yaml(cfg_file)
        assert cfg.api.base_url == "http://x"
        assert cfg.browser.page_size == 12
        assert cfg.browser.stale_after_seconds == 120
        assert cfg.database.path == "db/vidbrowse.db"

    def test_empty_yaml(self, tmp_path):
        cfg_file = tmp_path / "empty.yaml"
        cfg_file.write_text("")
        cfg = Config.from_yaml(cfg_file)
        assert cfg.api.timeout == 10

    def test_env_var_expansion_in_yaml(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VB_TEST_API", "http://from-env:9000")
        cfg_file = tmp_path / "env_config.yaml"
        cfg_file.write_text('api:\n  base_url: "${VB_TEST_API}"\n')
        cfg = Config.from_yaml(cfg_file)
        assert cfg.api.base_url == "http://from-env:9000"


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch):
        for var in ["VB_API_BASE_URL", "VB_PAGE_SIZE", "VB_WEB_PORT", "VB_POPULAR_SEARCHES"]:
            monkeypatch.delenv(var, raising=False)
        cfg = Config.from_env()
        assert cfg.api.base_url == "http://localhost:8080"
        assert cfg.api.search_timeout == 20
        assert cfg.browser.page_size == 12
        assert cfg.browser.popular_searches == DEFAULT_POPULAR_SEARCHES
        assert cfg.web.port == 8000

    def test_from_env_vars(self, monkeypatch):
        monkeypatch.setenv("VB_API_BASE_URL", "http://videos:8080")
        monkeypatch.setenv("VB_PAGE_SIZE", "20")
        monkeypatch.setenv("VB_STALE_AFTER_SECONDS", "5")
        monkeypatch.setenv("VB_POPULAR_SEARCHES", "cats, dogs ,,birds")
        cfg = Config.from_env()
        assert cfg.api.base_url == "http://videos:8080"
        assert cfg.browser.page_size == 20
        assert cfg.browser.stale_after_seconds == 5.0
        assert cfg.browser.popular_searches == ["cats", "dogs", "birds"]


class TestLoadConfig:
    def test_load_from_path(self, config_yaml):
        cfg = load_config(str(config_yaml))
        assert cfg.browser.page_size == 24

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/path/config.yaml")

    def test_fallback_to_env(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)  # No config.yaml present
        cfg = load_config(None)
        assert isinstance(cfg, Config)

    def test_default_path_in_cwd(self, monkeypatch, tmp_path):
        (tmp_path / "config.yml").write_text("browser:\n  page_size: 6\n")
        monkeypatch.chdir(tmp_path)
        cfg = load_config(None)
        assert cfg.browser.page_size == 6

    def test_invalid_sort_falls_back(self, tmp_path, caplog):
        cfg_file = tmp_path / "bad_sort.yaml"
        cfg_file.write_text("browser:\n  default_sort: popularity\n")
        with caplog.at_level(logging.WARNING):
            cfg = load_config(str(cfg_file))
        assert cfg.browser.default_sort == "latest"
        assert "default_sort" in caplog.text

    def test_invalid_search_type_falls_back(self, tmp_path):
        cfg_file = tmp_path / "bad_type.yaml"
        cfg_file.write_text("browser:\n  default_search_type: none\n")
        cfg = load_config(str(cfg_file))
        assert cfg.browser.default_search_type == "live"

    def test_non_positive_sizes_fall_back(self, tmp_path):
        cfg_file = tmp_path / "bad_sizes.yaml"
        cfg_file.write_text("browser:\n  page_size: 0\n  window_size: -1\n  cache_max_entries: 0\n")
        cfg = load_config(str(cfg_file))
        defaults = BrowserConfig()
        assert cfg.browser.page_size == defaults.page_size
        assert cfg.browser.window_size == defaults.window_size
        assert cfg.browser.cache_max_entries == defaults.cache_max_entries

    def test_empty_base_url_warns(self, tmp_path, caplog):
        cfg_file = tmp_path / "no_url.yaml"
        cfg_file.write_text('api:\n  base_url: ""\n')
        with caplog.at_level(logging.WARNING):
            load_config(str(cfg_file))
        assert "base_url is empty" in caplog.text
