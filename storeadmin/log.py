import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False


def setup_logging(level: str = "INFO", rich_console: Optional[Console] = None) -> None:
    """Configure the root logger once. Pass a rich Console to log through it."""
    global _configured
    if _configured:
        return
    if rich_console is not None:
        logging.basicConfig(
            level=level,
            format="%(message)s",
            datefmt="[%X]",
            handlers=[RichHandler(console=rich_console, rich_tracebacks=True, show_path=False)],
        )
    else:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    _configured = True
