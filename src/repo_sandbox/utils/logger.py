# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

"""Loguru sink configuration: human-readable stderr plus a JSON log file."""

import sys
from pathlib import Path

from loguru import logger

from repo_sandbox.config import DeployConfig

LOG_DIR = Path("logs")
LOG_FILE = LOG_DIR / "app.log"

__all__ = ["logger"]

_level = DeployConfig().log_level.upper()

logger.remove()

logger.add(
    sys.stderr,
    level=_level,
    format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
)

LOG_DIR.mkdir(parents=True, exist_ok=True)
logger.add(
    LOG_FILE,
    level=_level,
    rotation="10 MB",
    retention="7 days",
    serialize=True,
    enqueue=True,
)
