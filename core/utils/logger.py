"""
zstar Logger - Centralized Logging Utility
"""
import logging
import sys

def setup_logger():
    # Create a custom logger
    logger = logging.getLogger("zstar")
    logger.setLevel(logging.DEBUG)

    # Console output stays at INFO, per-entry detail is DEBUG
    c_handler = logging.StreamHandler(sys.stdout)
    c_handler.setLevel(logging.INFO)

    c_format = logging.Formatter('%(message)s') # Clean output for CLI
    c_handler.setFormatter(c_format)

    if not logger.handlers:
        logger.addHandler(c_handler)

    return logger

# Initialize singleton
logger = setup_logger()

__all__ = ["logger"]
