"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    # Local key-value store holding the user's LLM settings
    data_dir: Path = field(default_factory=lambda: Path("data"))

    # Root URL of the chat API server (e.g. "http://localhost:8000").
    # Empty means the chat UI calls the translator in-process.
    chat_api_url: str = ""

    # Bind address of `python main.py`
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Config":
        return cls(
            data_dir=Path(os.getenv("DATA_DIR", "data")),
            chat_api_url=os.getenv("CHAT_API_URL", ""),
            api_host=os.getenv("API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("API_PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
