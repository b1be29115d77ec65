"""
Main entry point for the transmission-loader application.

Commands report configuration and daemon errors themselves and exit through
typer; anything that escapes them is a bug and is reported here.
"""

import logging
import sys

from rich.console import Console

from transmission_loader.cli.app import app
from transmission_loader.cli.formatters import format_error_with_suggestions


def main() -> None:
    """Main entry point function."""
    log = logging.getLogger("transmission_loader")

    try:
        app()
    except Exception as e:
        Console().print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
