"""
Logging setup for the FleetFlow backend.
"""

import logging

LOGGER_NAME = "fleetflow"


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler to the application logger (idempotent)."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(getattr(h, "_fleetflow", False) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        console_handler._fleetflow = True
        logger.addHandler(console_handler)

    logger.propagate = False
    return logger
