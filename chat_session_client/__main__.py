"""Allow running the client with ``python -m chat_session_client``."""

from .cli import main

if __name__ == "__main__":
    main()
