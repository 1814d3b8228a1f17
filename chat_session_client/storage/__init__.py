"""
Storage module for the Chat Session Client.

This module holds the key-value stores used for host-side persisted state
and the credential record built on top of them.
"""

from .key_value_store import KeyValueStore, MemoryKeyValueStore, JsonFileKeyValueStore
from .credential_store import CredentialStore

__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "CredentialStore"
]
