"""
Run configuration and utility helpers.

This module centralizes common functionality used across the project:

- loading the analysis configuration (config/analysis.yaml)
- ensuring directories exist before writing files
- constructing loggers that respect config/logging settings

The analysis runner and the command-line script rely on these utilities.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import yaml


DEFAULT_ANALYSIS_CONFIG_PATH = "config/analysis.yaml"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------


def load_analysis_config(
    config_path: str = DEFAULT_ANALYSIS_CONFIG_PATH,
) -> Dict[str, Any]:
    """
    Load and return the analysis configuration dictionary.

    Parameters
    ----------
    config_path : str
        Path to the analysis YAML configuration file.

    Returns
    -------
    Dict[str, Any]
        Parsed configuration with sections such as "paths", "logging",
        "sentiment", "topics" and "correlation".

    Raises
    ------
    FileNotFoundError
        If the YAML file does not exist.
    ValueError
        If the YAML file is empty or cannot be parsed.
    """
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Analysis config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        raise ValueError(f"Analysis config file is empty or invalid: {config_path}")

    # Permissive: downstream code reads the keys it needs with defaults.
    return cfg


# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------


def ensure_dir_exists(path: str) -> None:
    """
    Ensure that a directory exists (create it if necessary).

    Parameters
    ----------
    path : str
        Directory path.
    """
    if path and not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------


def _parse_log_level(level_str: str) -> int:
    """
    Convert a string log level into a logging module constant.

    Parameters
    ----------
    level_str : str
        One of: "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL" (case-insensitive).

    Returns
    -------
    int
        Corresponding logging level; INFO for unknown strings.
    """
    level_str = (level_str or "INFO").upper()
    return {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }.get(level_str, logging.INFO)


def get_logger(
    name: str,
    config: Dict[str, Any],
    log_file_suffix: Optional[str] = None,
) -> logging.Logger:
    """
    Construct and return a logger that respects the logging section of
    the analysis config.

    The same handlers are attached to the "usenet_text" package logger, so
    messages from library modules end up in the same console and file.

    Parameters
    ----------
    name : str
        Logger name.
    config : Dict[str, Any]
        Analysis configuration.
    log_file_suffix : Optional[str]
        Optional suffix appended to the log file name (e.g., "sentiment").

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    # If the logger already has handlers, assume it's already configured.
    if logger.handlers:
        return logger

    logging_cfg = config.get("logging", {}) or {}
    paths_cfg = config.get("paths", {}) or {}

    level = _parse_log_level(logging_cfg.get("level", "INFO"))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if bool(logging_cfg.get("to_file", True)):
        logs_dir = paths_cfg.get("logs_dir", "outputs/logs")
        ensure_dir_exists(logs_dir)

        file_prefix = logging_cfg.get("file_prefix", "usenet_analysis")
        if log_file_suffix:
            filename = f"{file_prefix}_{log_file_suffix}.log"
        else:
            filename = f"{file_prefix}.log"

        file_handler = logging.FileHandler(os.path.join(logs_dir, filename), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    package_logger = logging.getLogger("usenet_text")
    for target in (logger, package_logger):
        target.setLevel(level)
        if target is package_logger and target.handlers:
            continue
        for handler in handlers:
            target.addHandler(handler)
        target.propagate = False

    return logger
