"""Module entry point for ``python -m watchdog_bot``."""
from __future__ import annotations

from .bot import run


def main() -> None:
    """Run the WatchDog bot."""

    run()


if __name__ == "__main__":
    main()
