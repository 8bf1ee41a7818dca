"""
Configuration settings for cvdoc.

Values come from the environment (a local ``.env`` file is honoured).
"""

from dotenv import load_dotenv
load_dotenv()          # .env values feed the CVDOC_* lookups below
import logging
import os

# Local document store
DATA_DIR = os.getenv("CVDOC_DATA_DIR", ".cvdoc")
STORAGE_KEY = os.getenv("CVDOC_STORAGE_KEY", "cv-builder-data")

# Logging
LOG_LEVEL = os.getenv("CVDOC_LOG_LEVEL", "WARNING").upper()


def get_log_level(verbose: bool = False) -> int:
    """Numeric logging level; ``verbose`` forces DEBUG."""
    if verbose:
        return logging.DEBUG
    return getattr(logging, LOG_LEVEL, logging.WARNING)
