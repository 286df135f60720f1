"""
config.py — Runtime settings for the tickets server
====================================================
Values come from the environment. A .env file in the working directory is
read first (python-dotenv), so a local checkout can be configured without
exporting anything.

  HOST              interface to bind            (default 0.0.0.0)
  PORT              port to listen on            (default 3001)
  TICKETS_DATA_DIR  directory holding the stores (default ./data)
  TICKETS_PATH      ticket ledger JSON file      (default <data dir>/mock_tickets_data.json)
  PID_MAP_PATH      patient directory JSON file  (default <data dir>/pid_to_map.json)
  LOG_LEVEL         logging level name           (default INFO)
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

SERVER_NAME = "tickets-server"
SERVER_VERSION = "1.0.0"

TICKETS_FILENAME = "mock_tickets_data.json"
PID_MAP_FILENAME = "pid_to_map.json"


class Settings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=3001, ge=1, le=65535)
    tickets_path: Path = Path("data") / TICKETS_FILENAME
    pid_map_path: Path = Path("data") / PID_MAP_FILENAME
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Settings":
        """Build settings from the environment, loading ``env_file`` (or ./.env) first."""
        load_dotenv(env_file or Path.cwd() / ".env")

        data_dir = Path(os.getenv("TICKETS_DATA_DIR", "data"))
        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=os.getenv("PORT", "3001"),
            tickets_path=os.getenv("TICKETS_PATH") or data_dir / TICKETS_FILENAME,
            pid_map_path=os.getenv("PID_MAP_PATH") or data_dir / PID_MAP_FILENAME,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
