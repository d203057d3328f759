"""Configuration loading and management for cachepool"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_FILENAME = ".cachepool.yaml"

ENV_OVERRIDES = {
    "backend": "CACHEPOOL_BACKEND",
    "redis_url": "CACHEPOOL_REDIS_URL",
    "default_ttl": "CACHEPOOL_DEFAULT_TTL",
}


class CacheConfig(BaseModel):
    """Cache configuration"""

    backend: str = Field(default="memory", description="Cache backend (memory, redis)")
    redis_url: str = Field(default="redis://localhost:6379", description="Redis URL")
    redis_db: int = Field(default=0, description="Redis database number")
    key_prefix: str = Field(default="cachepool:", description="Cache key prefix")
    default_ttl: int | None = Field(
        default=None, description="Default TTL in seconds (None = never expire)"
    )
    max_size: int = Field(default=1000, description="Max entries for the memory backend")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate cache backend"""
        valid_backends = ["memory", "redis", "test_redis"]
        if v not in valid_backends:
            msg = f"Backend must be one of {valid_backends}"
            raise ValueError(msg)
        return v

    @field_validator("default_ttl")
    @classmethod
    def validate_default_ttl(cls, v: int | None) -> int | None:
        """Validate default TTL"""
        if v is not None and v < 0:
            msg = "default_ttl must be zero or positive"
            raise ValueError(msg)
        return v


class LoggingConfig(BaseModel):
    """Logging configuration"""

    level: str = Field(default="WARNING", description="Log level name")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            msg = f"Log level must be one of {valid_levels}"
            raise ValueError(msg)
        return v.upper()


class Config(BaseModel):
    """Application configuration"""

    cache: CacheConfig = CacheConfig()
    logging: LoggingConfig = LoggingConfig()

    def apply_env_overrides(self) -> None:
        """Override cache settings from CACHEPOOL_* environment variables"""
        overrides: dict[str, str] = {}
        for field, env_var in ENV_OVERRIDES.items():
            value = os.getenv(env_var)
            if value:
                overrides[field] = value

        if not overrides:
            return

        try:
            self.cache = CacheConfig(**{**self.cache.model_dump(), **overrides})
        except ValidationError as e:
            msg = f"Invalid cache settings in environment: {e}"
            raise ValueError(msg) from e


def find_config_file() -> Path | None:
    """Find .cachepool.yaml config file in current or parent directories"""
    current = Path.cwd()

    # Check current directory and up to 5 parent directories
    for _ in range(6):
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path

        # Stop at root directory
        if current.parent == current:
            break
        current = current.parent

    return None


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file

    Args:
        config_path: Path to config file. If None, searches for .cachepool.yaml

    Returns:
        Loaded configuration object

    Raises:
        FileNotFoundError: If config file not found
        ValueError: If config is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            msg = f"No {CONFIG_FILENAME} file found in current or parent directories"
            raise FileNotFoundError(msg)

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in config file: {e}"
        raise ValueError(msg) from e
    except OSError as e:
        msg = f"Cannot read config file: {e}"
        raise FileNotFoundError(msg) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = "Config file must contain a YAML object"
        raise ValueError(msg)

    try:
        config = Config(**data)
    except ValidationError as e:
        msg = f"Invalid configuration: {e}"
        raise ValueError(msg) from e

    config.apply_env_overrides()
    return config


class _ConfigStore:
    """Singleton store for configuration"""

    _instance: Config | None = None

    @classmethod
    def get(cls) -> Config:
        """Get the configuration instance (loads on first call)"""
        if cls._instance is None:
            try:
                cls._instance = load_config()
            except FileNotFoundError:
                config = Config()
                config.apply_env_overrides()
                cls._instance = config
        return cls._instance

    @classmethod
    def set_instance(cls, config: Config) -> None:
        """Set the configuration instance (mainly for testing)"""
        cls._instance = config

    @classmethod
    def clear(cls) -> None:
        """Clear the configuration instance (mainly for testing)"""
        cls._instance = None


def get_config() -> Config:
    """Get the global configuration instance

    Falls back to defaults (plus environment overrides) when no config file
    exists.
    """
    return _ConfigStore.get()


def set_config(config: Config) -> None:
    """Set the global configuration instance (mainly for testing)"""
    _ConfigStore.set_instance(config)


def clear_config() -> None:
    """Forget the global configuration instance (mainly for testing)"""
    _ConfigStore.clear()
