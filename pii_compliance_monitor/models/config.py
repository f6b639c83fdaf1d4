"""
Configuration classes for the compliance monitor.
"""

import os
from dataclasses import dataclass
from typing import Optional, Dict, Any

from dotenv import load_dotenv

from ..exceptions import ConfigurationException


@dataclass
class StoreConfig:
    """Configuration for the document/policy store collaborator."""

    store_type: str = "local"
    storage_path: str = "./compliance_data"
    persist_on_write: bool = True

    # BM25 ranking parameters
    bm25_k1: float = 1.2
    bm25_b: float = 0.75

    def validate(self) -> None:
        """Validate store configuration parameters."""
        # Supported types are checked against the StoreFactory registry
        if not self.store_type:
            raise ConfigurationException("store_type cannot be empty")

        if self.store_type == "local" and not self.storage_path:
            raise ConfigurationException("storage_path cannot be empty for local store")

        if self.bm25_k1 < 0:
            raise ConfigurationException("bm25_k1 cannot be negative")

        if not 0 <= self.bm25_b <= 1:
            raise ConfigurationException("bm25_b must be between 0 and 1")


@dataclass
class ObservabilityConfig:
    """Logging configuration."""

    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    def validate(self) -> None:
        """Validate observability configuration parameters."""
        valid_log_levels = ["DEBUG", "INFO", "WARN", "ERROR", "FATAL"]
        if self.log_level.upper() not in valid_log_levels:
            raise ConfigurationException(
                f"Invalid log_level '{self.log_level}'. Must be one of: {valid_log_levels}"
            )

        valid_log_formats = ["json", "text"]
        if self.log_format not in valid_log_formats:
            raise ConfigurationException(
                f"Invalid log_format '{self.log_format}'. Must be one of: {valid_log_formats}"
            )


@dataclass
class MonitorConfig:
    """Main configuration class for the compliance monitor."""

    store: Optional[StoreConfig] = None
    observability: Optional[ObservabilityConfig] = None

    def __post_init__(self):
        """Initialize default configurations and validate."""
        if self.store is None:
            self.store = StoreConfig()

        if self.observability is None:
            self.observability = ObservabilityConfig()

        self.validate()

    def validate(self) -> None:
        """Validate the complete configuration."""
        self.store.validate()
        self.observability.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "store": {
                "store_type": self.store.store_type,
                "storage_path": self.store.storage_path,
                "persist_on_write": self.store.persist_on_write,
                "bm25_k1": self.store.bm25_k1,
                "bm25_b": self.store.bm25_b,
            },
            "observability": {
                "log_level": self.observability.log_level,
                "log_format": self.observability.log_format,
                "log_file": self.observability.log_file,
            },
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "MonitorConfig":
        """Create configuration from dictionary."""
        store_config = None
        if "store" in config_dict:
            store_config = StoreConfig(**config_dict["store"])

        observability_config = None
        if "observability" in config_dict:
            observability_config = ObservabilityConfig(**config_dict["observability"])

        return cls(store=store_config, observability=observability_config)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "MonitorConfig":
        """
        Create configuration from environment variables.

        Values from ``env_file`` (or a ``.env`` in the working directory) are
        loaded first without overriding variables already set.
        """
        load_dotenv(dotenv_path=env_file)

        persist = os.getenv("COMPLIANCE_PERSIST_ON_WRITE", "true").lower() in {"1", "true", "yes"}
        store_config = StoreConfig(
            store_type=os.getenv("COMPLIANCE_STORE_TYPE", "local"),
            storage_path=os.getenv("COMPLIANCE_STORAGE_PATH", "./compliance_data"),
            persist_on_write=persist,
        )
        observability_config = ObservabilityConfig(
            log_level=os.getenv("COMPLIANCE_LOG_LEVEL", "INFO"),
            log_format=os.getenv("COMPLIANCE_LOG_FORMAT", "json"),
            log_file=os.getenv("COMPLIANCE_LOG_FILE") or None,
        )
        return cls(store=store_config, observability=observability_config)
