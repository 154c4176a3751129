"""
Test configuration management
"""
import pytest
import tempfile
import os
from pydantic import ValidationError
from shard_search.core.config import Config, SearchConfig, ClusterConfig, LoggingConfig
from shard_search.core.errors import ConfigurationError


class TestConfig:
    """Test configuration management"""

    def test_search_config_defaults(self):
        """Test the default search configuration"""
        config = SearchConfig()

        assert config.exclude_trailing_bytes == 0
        assert config.algorithm == "brute_force"

    def test_cluster_config_creation(self):
        """Test creating a cluster configuration"""
        config = ClusterConfig(workers=4, backend="mpi", collective_timeout=2.5)

        assert config.workers == 4
        assert config.backend == "mpi"
        assert config.collective_timeout == 2.5

    def test_cluster_config_default_workers(self):
        """Default worker count comes from the machine and is positive"""
        assert ClusterConfig().workers >= 1

    def test_invalid_values_rejected(self):
        """Test validation of out-of-range settings"""
        with pytest.raises(ValidationError):
            ClusterConfig(workers=0)
        with pytest.raises(ValidationError):
            ClusterConfig(backend="sockets")
        with pytest.raises(ValidationError):
            SearchConfig(exclude_trailing_bytes=-1)
        with pytest.raises(ValidationError):
            SearchConfig(algorithm="regex")

    def test_from_env(self, monkeypatch):
        """Test configuration from environment variables"""
        monkeypatch.setenv("SHARD_SEARCH_WORKERS", "3")
        monkeypatch.setenv("SHARD_SEARCH_EXCLUDE_TRAILING", "1")
        monkeypatch.setenv("SHARD_SEARCH_ALGORITHM", "find")
        monkeypatch.setenv("SHARD_SEARCH_LOG_LEVEL", "DEBUG")

        config = Config.from_env()

        assert config.cluster.workers == 3
        assert config.cluster.backend == "threads"
        assert config.search.exclude_trailing_bytes == 1
        assert config.search.algorithm == "find"
        assert config.logging.level == "DEBUG"

    def test_config_serialization(self):
        """Test configuration serialization to/from file"""
        config = Config(
            search=SearchConfig(exclude_trailing_bytes=1),
            cluster=ClusterConfig(workers=6),
            logging=LoggingConfig(level="WARNING")
        )

        with tempfile.NamedTemporaryFile(mode='w', suffix='.json', delete=False) as f:
            config.save_to_file(f.name)

            # Load config back
            loaded_config = Config.load_from_file(f.name)

            assert loaded_config.search.exclude_trailing_bytes == 1
            assert loaded_config.cluster.workers == 6
            assert loaded_config.logging.level == "WARNING"

            # Clean up
            os.unlink(f.name)

    def test_from_env_rejects_malformed_values(self, monkeypatch):
        """Malformed environment values raise ConfigurationError"""
        for workers in ("0", "four"):
            monkeypatch.setenv("SHARD_SEARCH_WORKERS", workers)
            with pytest.raises(ConfigurationError):
                Config.from_env()

    def test_load_from_file_rejects_invalid_settings(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text('{"cluster": {"workers": 0}}')

        with pytest.raises(ConfigurationError, match="invalid configuration file"):
            Config.load_from_file(str(path))

    def test_load_from_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            Config.load_from_file(str(tmp_path / "missing.json"))


if __name__ == '__main__':
    pytest.main([__file__])
