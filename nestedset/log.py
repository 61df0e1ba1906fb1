"""Logging setup for nestedset."""

import logging
import sys
from typing import Optional

from .config import ConfigManager, config as default_config


def setup_logging(cfg: Optional[ConfigManager] = None) -> None:
    """
    Configure logging from the configuration.

    Logs go to stderr so that converted output written to stdout stays clean.
    A file handler is added when `logging.file` is set.
    """
    cfg = cfg or default_config
    level = getattr(logging, cfg.log_level, logging.INFO)

    handlers = [logging.StreamHandler(sys.stderr)]
    if cfg.log_file:
        handlers.append(logging.FileHandler(cfg.log_file, encoding='utf-8'))

    logging.basicConfig(
        level=level,
        format=cfg.log_format,
        handlers=handlers,
        force=True
    )
