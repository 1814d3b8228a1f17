"""
Slack implementation of the remote session handle.

Credentials map onto the Slack Web API as follows: the home server is the
API base URL, the user id is the Slack member id the token belongs to, and
the access token is a user or bot token.
"""

import logging
from typing import Any, Dict

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from ..config import Config
from ..exceptions import (
    SessionError,
    StorageConfigurationError,
    SessionStartError,
    LogoutError
)
from ..models import Credentials
from ..remote_session.session_interface import RemoteSessionInterface, SessionStoreInterface
from ..remote_session.session_factory import RemoteSessionFactory


def _normalize_base_url(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class SlackRemoteSession(RemoteSessionInterface):
    """Remote session backed by the Slack Web API."""

    def __init__(self, credentials: Credentials, config: Config):
        super().__init__(credentials)
        self.config = config
        self.logger = logging.getLogger(__name__)

        self.web_client = AsyncWebClient(
            token=credentials.access_token,
            base_url=_normalize_base_url(credentials.home_server),
            timeout=config.slack.timeout
        )

        self._started = False
        self.account_info: Dict[str, Any] = {}

    @property
    def is_started(self) -> bool:
        return self._started

    async def configure_store(self, store: SessionStoreInterface) -> None:
        try:
            await store.open(self.credentials)
        except StorageConfigurationError:
            raise
        except Exception as e:
            raise StorageConfigurationError("Failed to open session store", str(e)) from e

        self.store = store

    async def start(self) -> None:
        if self.store is None or not self.store.is_open:
            raise SessionError("Session store must be configured before starting")

        try:
            response = await self.web_client.auth_test()
        except SlackApiError as e:
            raise SessionStartError(
                "Slack authentication failed", str(e.response.get("error", e))
            ) from e
        except Exception as e:
            raise SessionStartError("Slack authentication failed", str(e)) from e

        if not response["ok"]:
            raise SessionStartError("Slack authentication failed", response.get("error", "Unknown error"))

        reported_user = response.get("user_id")
        if reported_user != self.credentials.user_id:
            raise SessionStartError(
                "Token does not belong to the configured user",
                f"expected {self.credentials.user_id}, server reported {reported_user}"
            )

        self.account_info = {
            "user_id": reported_user,
            "user": response.get("user"),
            "team_id": response.get("team_id"),
            "team": response.get("team"),
            "url": response.get("url")
        }

        try:
            await self.store.save_account(self.account_info)
        except OSError as e:
            raise SessionStartError("Failed to record account in session store", str(e)) from e

        self._started = True
        self.logger.info(f"Authenticated as: {self.account_info['user']} ({reported_user})")

    async def logout(self) -> None:
        self._started = False
        try:
            response = await self.web_client.auth_revoke()
        except SlackApiError as e:
            raise LogoutError("Failed to revoke Slack token", str(e.response.get("error", e))) from e
        except Exception as e:
            raise LogoutError("Failed to revoke Slack token", str(e)) from e

        if not response.get("revoked", False):
            raise LogoutError("Slack did not revoke the token", response.get("error", "Unknown error"))

        if self.store is not None:
            await self.store.clear()
        self.logger.info(f"Revoked token for {self.credentials.user_id}")

    def get_session_info(self) -> Dict[str, Any]:
        info = super().get_session_info()
        info["team"] = self.account_info.get("team")
        return info


RemoteSessionFactory.register_backend("slack", SlackRemoteSession)
