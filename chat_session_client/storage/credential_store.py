"""
Persistence of account credentials under a single well-known key.
"""

import logging
from typing import Optional

from ..config import DEFAULT_CREDENTIALS_KEY
from ..models import Credentials
from .key_value_store import KeyValueStore


class CredentialStore:
    """
    Reads and writes the flat ``{homeServer, userId, token}`` record.

    An absent record, or one missing any field, loads as None.
    """

    def __init__(self, store: KeyValueStore, key: str = DEFAULT_CREDENTIALS_KEY):
        self.store = store
        self.key = key
        self.logger = logging.getLogger(__name__)

    def load(self) -> Optional[Credentials]:
        record = self.store.get(self.key)
        if record is None:
            return None

        credentials = Credentials.from_record(record)
        if credentials is None:
            self.logger.warning(f"Ignoring incomplete credentials record under '{self.key}'")
        return credentials

    def save(self, credentials: Credentials) -> None:
        """
        Persist complete credentials, or delete the record otherwise.

        Raises:
            PersistenceError: If the backing store cannot be written
        """
        if credentials is None or not credentials.is_complete():
            self.delete()
            return

        self.store.set(self.key, credentials.to_record())
        self.logger.debug(f"Saved credentials for {credentials.user_id}")

    def delete(self) -> None:
        self.store.delete(self.key)
        self.logger.debug(f"Deleted credentials record '{self.key}'")
