"""Process-wide logging configuration"""

import logging
import sys


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configures logging for the application.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quieten down noisy libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
