"""
Runtime settings read from environment variables (and a local .env file).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_STORE_DIR = Path.home() / ".research_assistant"


@dataclass
class Settings:
    """Configuration for the assistant, the store and the CLI."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    store_dir: Path = DEFAULT_STORE_DIR
    max_workers: int = 4
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        """
        Build settings from the environment.

        Args:
            load_env_file: Also read variables from a .env file in the working directory

        Returns:
            Settings instance
        """
        if load_env_file:
            load_dotenv()

        max_workers = os.getenv("RA_MAX_WORKERS", "4")
        try:
            workers = max(1, int(max_workers))
        except ValueError:
            raise ValueError(f"RA_MAX_WORKERS must be an integer, got {max_workers!r}")

        return cls(
            api_key=os.getenv("GOOGLE_API_KEY") or os.getenv("API_KEY"),
            model=os.getenv("RA_MODEL", DEFAULT_MODEL),
            store_dir=Path(os.getenv("RA_STORE_DIR", str(DEFAULT_STORE_DIR))).expanduser(),
            max_workers=workers,
            log_level=os.getenv("RA_LOG_LEVEL", "WARNING").upper(),
        )

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ValueError(
                "GOOGLE_API_KEY not found in environment variables. "
                "Please set it in .env file or as environment variable."
            )
        return self.api_key
