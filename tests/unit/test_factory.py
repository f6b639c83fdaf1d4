"""
Unit tests for StoreFactory.
"""

import pytest

from pii_compliance_monitor.exceptions import ConfigurationException
from pii_compliance_monitor.factory import StoreFactory
from pii_compliance_monitor.models.config import StoreConfig
from pii_compliance_monitor.storage.local import LocalDocumentStore


class TestStoreFactory:
    """Test cases for StoreFactory."""

    def test_memory_store(self):
        """Test the memory store has no storage path."""
        store = StoreFactory.create_store(StoreConfig(store_type="memory"))

        assert isinstance(store, LocalDocumentStore)
        assert store.storage_path is None

    def test_local_store(self, tmp_path):
        """Test the local store uses the configured path and parameters."""
        config = StoreConfig(store_type="local", storage_path=str(tmp_path), bm25_k1=1.5)

        store = StoreFactory.create_store(config)

        assert store.storage_path == tmp_path
        assert store.k1 == 1.5

    def test_store_type_case_insensitive(self):
        """Test store types are matched case-insensitively."""
        store = StoreFactory.create_store(StoreConfig(store_type="MEMORY"))

        assert isinstance(store, LocalDocumentStore)

    def test_unsupported_store_type(self):
        """Test unknown store types are rejected."""
        with pytest.raises(ConfigurationException, match="Unsupported store type"):
            StoreFactory.create_store(StoreConfig(store_type="elasticsearch"))

    def test_register_requires_interface(self):
        """Test only store implementations can be registered."""
        with pytest.raises(ConfigurationException):
            StoreFactory.register_store_type("bogus", dict)

    def test_available_store_types(self):
        """Test the built-in registry."""
        types = StoreFactory.get_available_store_types()

        assert "local" in types
        assert "memory" in types
