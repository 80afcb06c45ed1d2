"""Metadata storage."""

from kblifecycle.store.metadata import InMemoryMetadataStore, JsonMetadataStore, MetadataStore

__all__ = ["InMemoryMetadataStore", "JsonMetadataStore", "MetadataStore"]
