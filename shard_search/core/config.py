"""
Configuration management for parallel shard search
"""
import os
from typing import Literal, Optional
from pydantic import BaseModel, Field

from shard_search.utils.helpers import default_worker_count
from .errors import ConfigurationError


class SearchConfig(BaseModel):
    """Configuration for the search itself"""
    # Bytes at the end of the source that are never searched (e.g. a trailing newline)
    exclude_trailing_bytes: int = Field(default=0, ge=0)
    algorithm: Literal["brute_force", "find"] = "brute_force"


class ClusterConfig(BaseModel):
    """Configuration for the worker topology"""
    workers: int = Field(default_factory=default_worker_count, ge=1)
    backend: Literal["threads", "mpi"] = "threads"
    collective_timeout: Optional[float] = Field(default=None, gt=0)  # seconds


class LoggingConfig(BaseModel):
    """Configuration for logging"""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class Config(BaseModel):
    """Main configuration class"""
    search: SearchConfig = Field(default_factory=SearchConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "Config":
        """Create configuration from environment variables"""
        search = {}
        cluster = {}
        log = {}
        try:
            if os.getenv("SHARD_SEARCH_EXCLUDE_TRAILING"):
                search["exclude_trailing_bytes"] = int(os.getenv("SHARD_SEARCH_EXCLUDE_TRAILING"))
            if os.getenv("SHARD_SEARCH_ALGORITHM"):
                search["algorithm"] = os.getenv("SHARD_SEARCH_ALGORITHM")
            if os.getenv("SHARD_SEARCH_WORKERS"):
                cluster["workers"] = int(os.getenv("SHARD_SEARCH_WORKERS"))
            if os.getenv("SHARD_SEARCH_BACKEND"):
                cluster["backend"] = os.getenv("SHARD_SEARCH_BACKEND")
            if os.getenv("SHARD_SEARCH_LOG_LEVEL"):
                log["level"] = os.getenv("SHARD_SEARCH_LOG_LEVEL")
            return cls(
                search=SearchConfig(**search),
                cluster=ClusterConfig(**cluster),
                logging=LoggingConfig(**log),
            )
        except ValueError as e:
            raise ConfigurationError(f"invalid configuration in environment: {e}") from e

    @classmethod
    def load_from_file(cls, file_path: str) -> "Config":
        """Load configuration from JSON file"""
        import json
        try:
            with open(file_path, 'r') as f:
                data = json.load(f)
            return cls(**data)
        except (OSError, ValueError, TypeError) as e:
            raise ConfigurationError(f"invalid configuration file {file_path}: {e}") from e

    def save_to_file(self, file_path: str) -> None:
        """Save configuration to JSON file"""
        import json
        with open(file_path, 'w') as f:
            json.dump(self.model_dump(), f, indent=2)
