"""
Factory for creating store instances based on configuration.
"""

from typing import Dict, Type

from .exceptions import ConfigurationException
from .models.config import StoreConfig
from .storage.interface import DocumentStoreInterface
from .storage.local import LocalDocumentStore


class StoreFactory:
    """Factory for creating document store instances based on configuration."""

    # Registry of available store implementations
    _store_registry: Dict[str, Type[DocumentStoreInterface]] = {
        "local": LocalDocumentStore,
        "memory": LocalDocumentStore,
    }

    @classmethod
    def create_store(cls, config: StoreConfig, logger=None) -> DocumentStoreInterface:
        """
        Create a store instance based on configuration.

        Args:
            config: Store configuration
            logger: Optional StructuredLogger handed to the store

        Returns:
            Store instance

        Raises:
            ConfigurationException: If the store type is not supported or
                the store cannot be created
        """
        store_type = config.store_type.lower()

        if store_type not in cls._store_registry:
            available_types = list(cls._store_registry.keys())
            raise ConfigurationException(
                f"Unsupported store type '{store_type}'. "
                f"Available types: {available_types}"
            )

        store_class = cls._store_registry[store_type]

        try:
            if store_class is LocalDocumentStore:
                return store_class(
                    storage_path=config.storage_path if store_type == "local" else None,
                    k1=config.bm25_k1,
                    b=config.bm25_b,
                    persist_on_write=config.persist_on_write,
                    logger=logger
                )
            return store_class()
        except ConfigurationException:
            raise
        except Exception as e:
            raise ConfigurationException(
                f"Failed to create {store_type} store: {str(e)}"
            )

    @classmethod
    def register_store_type(
        cls,
        store_type: str,
        store_class: Type[DocumentStoreInterface]
    ) -> None:
        """
        Register a new store type.

        Args:
            store_type: Name of the store type
            store_class: Store class to register; must be constructible without arguments
        """
        if not issubclass(store_class, DocumentStoreInterface):
            raise ConfigurationException(
                "Store class must implement DocumentStoreInterface"
            )

        cls._store_registry[store_type.lower()] = store_class

    @classmethod
    def get_available_store_types(cls) -> list:
        """Get list of available store types."""
        return list(cls._store_registry.keys())
