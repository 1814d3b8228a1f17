"""
Unit tests for the core data models.
"""

import dataclasses

import pytest

from chat_session_client.models import Credentials, SessionState


class TestCredentials:
    """Test cases for the Credentials value object."""

    def test_complete(self):
        credentials = Credentials(home_server="h", user_id="u", access_token="t")
        assert credentials.is_complete()

    @pytest.mark.parametrize("kwargs", [
        {"user_id": "u", "access_token": "t"},
        {"home_server": "h", "access_token": "t"},
        {"home_server": "h", "user_id": "u"},
        {"home_server": "", "user_id": "u", "access_token": "t"},
    ])
    def test_incomplete(self, kwargs):
        assert not Credentials(**kwargs).is_complete()

    def test_immutable(self):
        credentials = Credentials(home_server="h", user_id="u", access_token="t")

        with pytest.raises(dataclasses.FrozenInstanceError):
            credentials.user_id = "other"

    def test_to_record(self):
        credentials = Credentials(home_server="h", user_id="u", access_token="t")

        assert credentials.to_record() == {"homeServer": "h", "userId": "u", "token": "t"}

    def test_from_record(self):
        credentials = Credentials.from_record({"homeServer": "h", "userId": "u", "token": "t"})

        assert credentials == Credentials(home_server="h", user_id="u", access_token="t")

    @pytest.mark.parametrize("record", [
        None,
        "homeServer=h",
        {},
        {"homeServer": "h", "userId": "u"},
        {"homeServer": "h", "userId": "u", "token": None},
        {"homeServer": "h", "userId": ["u"], "token": "t"},
    ])
    def test_from_record_rejects_incomplete(self, record):
        assert Credentials.from_record(record) is None

    def test_from_record_ignores_extra_fields(self):
        record = {"homeServer": "h", "userId": "u", "token": "t", "deviceId": "D1"}

        assert Credentials.from_record(record).is_complete()

    def test_token_hidden_from_repr(self):
        credentials = Credentials(home_server="h", user_id="u", access_token="xoxp-secret")

        assert "xoxp-secret" not in repr(credentials)

    def test_masked_token(self):
        assert Credentials(access_token="xoxp-12345678").masked_token() == "*********5678"
        assert Credentials(access_token="abc").masked_token() == "***"
        assert Credentials().masked_token() == ""

    def test_to_dict(self):
        data = Credentials(home_server="h", user_id="u", access_token="secret-token").to_dict()

        assert data == {"home_server": "h", "user_id": "u", "access_token": "********oken"}


class TestSessionState:

    def test_values(self):
        assert [state.value for state in SessionState] == [
            "needs_credentials", "not_started", "starting", "started"
        ]
