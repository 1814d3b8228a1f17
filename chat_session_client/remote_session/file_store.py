"""
File-backed session store.

Each account gets its own directory below the configured store root. The
directory holds an ``account.json`` document describing the account the
server reported at startup.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import aiofiles
import aiofiles.os

from ..exceptions import StorageConfigurationError, SessionError
from ..models import Credentials
from ..utils import safe_path_component
from .session_interface import SessionStoreInterface


class FileSessionStore(SessionStoreInterface):
    """Session store persisting account state as JSON files."""

    ACCOUNT_FILE = "account.json"

    def __init__(self, root_dir):
        self.root_dir = Path(root_dir)
        self.account_dir: Optional[Path] = None
        self.logger = logging.getLogger(__name__)

    @property
    def is_open(self) -> bool:
        return self.account_dir is not None

    @property
    def account_file(self) -> Path:
        if self.account_dir is None:
            raise SessionError("Session store is not open")
        return self.account_dir / self.ACCOUNT_FILE

    async def open(self, credentials: Credentials) -> None:
        if not credentials.is_complete():
            raise StorageConfigurationError("Cannot open session store", "credentials are incomplete")

        account_dir = self.root_dir / safe_path_component(credentials.user_id)
        try:
            await aiofiles.os.makedirs(account_dir, exist_ok=True)
        except OSError as e:
            raise StorageConfigurationError(
                f"Cannot create session store directory {account_dir}", str(e)
            ) from e

        self.account_dir = account_dir
        self.logger.debug(f"Opened session store at {account_dir}")

    async def save_account(self, info: Dict[str, Any]) -> None:
        document = dict(info)
        document["saved_at"] = datetime.now().isoformat()

        async with aiofiles.open(self.account_file, 'w') as f:
            await f.write(json.dumps(document, indent=2))

    async def load_account(self) -> Optional[Dict[str, Any]]:
        if not await aiofiles.os.path.exists(self.account_file):
            return None

        try:
            async with aiofiles.open(self.account_file, 'r') as f:
                content = await f.read()
            return json.loads(content)
        except (OSError, ValueError) as e:
            self.logger.error(f"Error loading account from {self.account_file}: {e}")
            return None

    async def clear(self) -> None:
        if self.account_dir is None:
            return

        if await aiofiles.os.path.isdir(self.account_dir):
            try:
                for name in await aiofiles.os.listdir(self.account_dir):
                    await aiofiles.os.remove(self.account_dir / name)
                await aiofiles.os.rmdir(self.account_dir)
            except OSError as e:
                self.logger.warning(f"Could not fully remove session store {self.account_dir}: {e}")
        self.logger.debug(f"Cleared session store at {self.account_dir}")
        self.account_dir = None
