"""
Runtime settings for the command-line tool, read from the environment.

A ``.env`` file is honoured when present; variables already set in the
environment win over it.

    RRT_SEPARATOR   display separator between fields   (default "-")
    RRT_STRICT      reject unknown network/channel     (default false)
    RRT_LOG_LEVEL   logging level                      (default WARNING)
"""

from __future__ import annotations

import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseModel):
    separator: str = "-"
    strict: bool = False
    log_level: LogLevel = "WARNING"


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Build ``Settings`` from the environment (and ``env_file`` if given)."""
    load_dotenv(env_file)

    return Settings(
        separator=os.environ.get("RRT_SEPARATOR", "-"),
        strict=os.environ.get("RRT_STRICT", "false"),
        log_level=os.environ.get("RRT_LOG_LEVEL", "WARNING").upper(),
    )
