"""Console logging helpers."""

import logging


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    GREEN = "\033[32m"
    RED = "\033[31m"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
    )
