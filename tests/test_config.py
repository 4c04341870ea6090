"""
Tests for cache configuration loading.
"""

import pytest

from perfcache.config import DEFAULT_TTL_SECONDS, CacheConfig, CacheConfigError, load_config


class TestCacheConfigDefaults:
    def test_defaults(self):
        config = CacheConfig()
        assert config.default_ttl == DEFAULT_TTL_SECONDS == 300
        assert config.max_entries is None
        assert config.enabled is True
        assert config.copy_values is True

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_default_ttl_rejected(self, ttl):
        with pytest.raises(CacheConfigError):
            CacheConfig(default_ttl=ttl)

    @pytest.mark.parametrize("ttl", [float("nan"), float("inf")])
    def test_non_finite_default_ttl_rejected(self, ttl):
        with pytest.raises(CacheConfigError, match="finite"):
            CacheConfig(default_ttl=ttl)

    def test_non_positive_max_entries_rejected(self):
        with pytest.raises(CacheConfigError):
            CacheConfig(max_entries=0)

    def test_config_error_is_value_error(self):
        assert issubclass(CacheConfigError, ValueError)


class TestFromEnv:
    def test_reads_all_variables(self):
        config = CacheConfig.from_env(
            {
                "PERF_CACHE_DEFAULT_TTL": "120",
                "PERF_CACHE_MAX_ENTRIES": "5000",
                "PERF_CACHE_ENABLED": "false",
                "PERF_CACHE_COPY_VALUES": "no",
            }
        )
        assert config.default_ttl == 120.0
        assert config.max_entries == 5000
        assert config.enabled is False
        assert config.copy_values is False

    def test_empty_values_keep_defaults(self):
        config = CacheConfig.from_env({"PERF_CACHE_DEFAULT_TTL": ""})
        assert config.default_ttl == DEFAULT_TTL_SECONDS

    def test_bad_number_raises(self):
        with pytest.raises(CacheConfigError, match="default_ttl"):
            CacheConfig.from_env({"PERF_CACHE_DEFAULT_TTL": "five minutes"})

    def test_nan_ttl_from_env_rejected(self):
        with pytest.raises(CacheConfigError, match="default_ttl"):
            CacheConfig.from_env({"PERF_CACHE_DEFAULT_TTL": "nan"})

    def test_bad_boolean_raises(self):
        with pytest.raises(CacheConfigError, match="enabled"):
            CacheConfig.from_env({"PERF_CACHE_ENABLED": "maybe"})


class TestFromYaml:
    def test_cache_section(self, tmp_path):
        path = tmp_path / "cache.yaml"
        path.write_text("cache:\n  default_ttl: 45\n  max_entries: 10\n")

        config = CacheConfig.from_yaml(path)
        assert config.default_ttl == 45
        assert config.max_entries == 10

    def test_top_level_mapping(self, tmp_path):
        path = tmp_path / "cache.yaml"
        path.write_text("default_ttl: 15\nenabled: false\n")

        config = CacheConfig.from_yaml(path)
        assert config.default_ttl == 15
        assert config.enabled is False

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "cache.yaml"
        path.write_text("")
        assert CacheConfig.from_yaml(path) == CacheConfig()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "cache.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(CacheConfigError, match="expected a mapping"):
            CacheConfig.from_yaml(path)

    def test_unknown_keys_ignored(self, tmp_path):
        path = tmp_path / "cache.yaml"
        path.write_text("cache:\n  default_ttl: 20\n  backend: redis\n")
        assert CacheConfig.from_yaml(path).default_ttl == 20


class TestLoadConfig:
    def test_prefers_yaml_file(self, tmp_path):
        path = tmp_path / "cache.yaml"
        path.write_text("cache:\n  default_ttl: 99\n")

        config = load_config({"PERF_CACHE_CONFIG": str(path), "PERF_CACHE_DEFAULT_TTL": "5"})
        assert config.default_ttl == 99

    def test_falls_back_to_env(self):
        assert load_config({"PERF_CACHE_DEFAULT_TTL": "5"}).default_ttl == 5

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("PERF_CACHE_MAX_ENTRIES", "7")
        assert load_config().max_entries == 7
