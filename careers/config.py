"""Configuration loaded from environment variables."""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

for _env_path in (Path(__file__).resolve().parent / ".env", BASE_DIR / ".env"):
    if load_dotenv(_env_path):
        break
load_dotenv()

DATA_FILE: Path = Path(os.getenv("CAREERS_DATA_FILE", BASE_DIR / "data" / "careers.sample.json"))
TEMPLATES_DIR: Path = Path(os.getenv("CAREERS_TEMPLATES_DIR", BASE_DIR / "templates"))
STATIC_DIR: Path = Path(os.getenv("CAREERS_STATIC_DIR", BASE_DIR / "static"))

# Dashboard owner; sign-in is handled by the hosted backend
OWNER_ID: str = os.getenv("CAREERS_OWNER_ID", "demo-owner")

SESSION_TTL: int = int(os.getenv("CAREERS_SESSION_TTL", "3600"))
CLEANUP_INTERVAL: int = int(os.getenv("CAREERS_CLEANUP_INTERVAL", "300"))
SSE_PING_INTERVAL: int = int(os.getenv("CAREERS_SSE_PING_INTERVAL", "15"))

LOG_LEVEL: str = os.getenv("CAREERS_LOG_LEVEL", "INFO")

DEFAULT_PRIMARY_COLOR = "#6366f1"
DEFAULT_SECONDARY_COLOR = "#8b5cf6"
DEFAULT_CURRENCY = "USD"
