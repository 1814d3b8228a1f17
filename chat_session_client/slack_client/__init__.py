"""
Slack client module for the Chat Session Client.

This module provides the Slack Web API backend for remote sessions.
"""

from .session import SlackRemoteSession

__all__ = [
    "SlackRemoteSession"
]
