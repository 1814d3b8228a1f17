"""
Command-line interface for Chat Session Client.

This module is the application's composition root: it loads configuration,
builds the session manager, registers itself as a lifecycle listener and
exposes login, status, start and logout commands.
"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import Optional

from tabulate import tabulate

from . import __version__
from .config import Config, load_config, create_default_config_file
from .exceptions import ChatSessionClientError, ConfigurationError, SessionStartError
from .models import Credentials, SessionState
from .session_manager import SessionManager, SessionListener, create_session_manager
from .utils import setup_logging, format_error


DEFAULT_CONFIG_PATH = "~/.chat-session-client/config.yaml"


class LifecycleWaiter(SessionListener):
    """Listener turning lifecycle callbacks into awaitable events."""

    def __init__(self):
        self.started = asyncio.Event()
        self.failed = asyncio.Event()
        self.logged_out = asyncio.Event()
        self.session = None
        self.error = None

    def on_session_started(self, session) -> None:
        self.session = session
        self.started.set()

    def on_session_failed(self, error) -> None:
        self.error = error
        self.failed.set()

    def on_logged_out(self) -> None:
        self.logged_out.set()


def cmd_login(config: Config, user_id: str, token: str, home_server: Optional[str] = None) -> int:
    """Store credentials for later sessions."""
    manager = create_session_manager(config)
    credentials = Credentials(
        home_server=home_server or config.slack.base_url,
        user_id=user_id,
        access_token=token
    )
    if not credentials.is_complete():
        print("❌ Home server, user id and token are all required")
        return 1

    manager.credentials = credentials
    print(f"✅ Credentials saved for {user_id} ({manager.state.value})")
    return 0


def cmd_status(config: Config, output_format: str = "table") -> int:
    """Show the stored account and the manager state."""
    manager = create_session_manager(config)
    stats = manager.get_manager_stats()

    if output_format == "json":
        print(json.dumps(stats, indent=2))
        return 0

    credentials = stats["credentials"] or {}
    table_data = [
        ["State", stats["state"]],
        ["Home server", credentials.get("home_server", "-")],
        ["User", credentials.get("user_id", "-")],
        ["Token", credentials.get("access_token", "-")],
        ["Failure policy", stats["failure_policy"]],
        ["Credentials file", str(config.credentials_path)],
    ]
    print(tabulate(table_data, headers=["Field", "Value"], tablefmt="grid"))
    return 0


async def run_start(manager: SessionManager) -> bool:
    """
    Start the session and wait for the outcome.

    Returns:
        bool: True if the session reached STARTED
    """
    waiter = LifecycleWaiter()
    manager.add_listener(waiter)

    task = manager.start()
    if task is None:
        print("❌ No stored credentials. Run 'chat-session-client login' first.")
        return False

    if await task:
        await waiter.started.wait()
        info = waiter.session.get_session_info()
        print(f"✅ Session started for {info['user_id']} on {info['home_server']}")
        return True

    # Let the dispatched failure callback run before reading the error
    await asyncio.sleep(0)
    error = waiter.error or manager.last_error or SessionStartError()
    print(format_error(error))
    if manager.state == SessionState.STARTING:
        print("   Session is stalled in 'starting'; run start again or logout.")
    return False


async def run_logout(manager: SessionManager, revoke: bool = False) -> None:
    """Log out, optionally starting the session first so the token is revoked remotely."""
    waiter = LifecycleWaiter()
    manager.add_listener(waiter)

    if revoke:
        task = manager.start()
        if task is not None and not await task:
            print("⚠️  Could not start the session; the token was not revoked remotely.")

    logout_task = manager.logout()
    if logout_task is not None:
        await logout_task
        await waiter.logged_out.wait()
    print("👋 Logged out")


def cmd_init_config(path: str) -> int:
    """Write a default configuration file."""
    path = os.path.expanduser(path)
    if os.path.exists(path):
        print(f"❌ Config file already exists: {path}")
        return 1

    create_default_config_file(path)
    print(f"✅ Default configuration written to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chat-session-client",
        description="Chat Session Client - manage the credentials and session of a chat account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  chat-session-client login --user-id U123 --token xoxp-...   # Save credentials
  chat-session-client status                                  # Show state
  chat-session-client start                                   # Start the session
  chat-session-client logout --revoke                         # Revoke and forget
  chat-session-client init-config                             # Write default config
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        help=f"Path to configuration file (default: {DEFAULT_CONFIG_PATH})"
    )
    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from configuration)"
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Also write logs to this file"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"Chat Session Client {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    login_parser = subparsers.add_parser("login", help="Save account credentials")
    login_parser.add_argument("--user-id", "-u", required=True, help="User identifier")
    login_parser.add_argument("--token", "-t", required=True, help="Access token")
    login_parser.add_argument("--home-server", help="Home server URL (default: slack.base_url)")

    status_parser = subparsers.add_parser("status", help="Show session state")
    status_parser.add_argument("--format", choices=["table", "json"], default="table",
                               help="Output format")

    subparsers.add_parser("start", help="Start the session and report the outcome")

    logout_parser = subparsers.add_parser("logout", help="Forget credentials")
    logout_parser.add_argument("--revoke", action="store_true",
                               help="Start the session first and revoke the token remotely")

    init_parser = subparsers.add_parser("init-config", help="Write a default configuration file")
    init_parser.add_argument("--path", default=DEFAULT_CONFIG_PATH, help="Destination path")

    return parser


def main(argv=None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logger = setup_logging(args.log_level or "INFO", args.log_file, args.json_logs)

    if args.command == "init-config":
        sys.exit(cmd_init_config(args.path))

    try:
        config = load_config(args.config)
        if not args.log_level:
            logger.setLevel(getattr(logging, config.log_level, logging.INFO))

        if args.command == "login":
            exit_code = cmd_login(config, args.user_id, args.token, args.home_server)
        elif args.command == "status":
            exit_code = cmd_status(config, args.format)
        elif args.command == "start":
            started = asyncio.run(run_start(create_session_manager(config)))
            exit_code = 0 if started else 1
        else:
            asyncio.run(run_logout(create_session_manager(config), args.revoke))
            exit_code = 0

    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        print(format_error(e))
        print()
        print("💡 Tip: Run 'chat-session-client init-config' to create a configuration file.")
        sys.exit(1)
    except ChatSessionClientError as e:
        logger.error(f"{e}")
        print(format_error(e))
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
