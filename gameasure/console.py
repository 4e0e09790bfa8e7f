from functools import lru_cache
import logging
import os
import sys

from rich.console import Console
from rich.theme import Theme


LOG = logging.getLogger(__name__)

CUSTOM_THEME = Theme(
    {
        "hit": "cyan",
        "success": "bold green",
        "error": "bold red",
        "muted": "dim",
    }
)


@lru_cache()
def should_use_color() -> bool:
    if os.getenv("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def get_console() -> Console:
    """
    Console used for every line the CLI prints.
    """
    return Console(
        theme=CUSTOM_THEME,
        highlight=False,
        soft_wrap=True,
        no_color=not should_use_color(),
    )


main_console = get_console()
