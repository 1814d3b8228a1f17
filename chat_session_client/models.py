"""
Core data models for the Chat Session Client.

This module defines the credentials value object and the session lifecycle
states shared by the session manager, the credential store and the CLI.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


# Field names of the persisted credentials record
HOME_SERVER_FIELD = "homeServer"
USER_ID_FIELD = "userId"
TOKEN_FIELD = "token"


class SessionState(Enum):
    """Lifecycle states of the session manager."""
    NEEDS_CREDENTIALS = "needs_credentials"
    NOT_STARTED = "not_started"
    STARTING = "starting"
    STARTED = "started"


@dataclass(frozen=True)
class Credentials:
    """
    Home server address, user identifier and access token of an account.

    Any field may be missing; only complete credentials are ever persisted
    or used to create a remote session.
    """
    home_server: Optional[str] = None
    user_id: Optional[str] = None
    access_token: Optional[str] = field(default=None, repr=False)

    def is_complete(self) -> bool:
        """Check that all three fields are non-empty strings."""
        return all(
            isinstance(value, str) and value
            for value in (self.home_server, self.user_id, self.access_token)
        )

    def to_record(self) -> Dict[str, str]:
        """Convert credentials to the flat record written to storage."""
        return {
            HOME_SERVER_FIELD: self.home_server,
            USER_ID_FIELD: self.user_id,
            TOKEN_FIELD: self.access_token
        }

    @classmethod
    def from_record(cls, record: Any) -> Optional["Credentials"]:
        """
        Build credentials from a stored record.

        Args:
            record: Value read from the key-value store

        Returns:
            Optional[Credentials]: Credentials, or None if the record is absent,
            not a mapping, or missing any of the three fields
        """
        if not isinstance(record, dict):
            return None

        credentials = cls(
            home_server=record.get(HOME_SERVER_FIELD),
            user_id=record.get(USER_ID_FIELD),
            access_token=record.get(TOKEN_FIELD)
        )
        if not credentials.is_complete():
            return None
        return credentials

    def masked_token(self) -> str:
        """Return the access token with all but the last four characters hidden."""
        if not self.access_token:
            return ""
        if len(self.access_token) <= 4:
            return "*" * len(self.access_token)
        return "*" * (len(self.access_token) - 4) + self.access_token[-4:]

    def to_dict(self) -> Dict[str, Any]:
        """Convert credentials to a display dictionary with the token masked."""
        return {
            "home_server": self.home_server,
            "user_id": self.user_id,
            "access_token": self.masked_token()
        }
