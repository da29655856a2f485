import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

# None keeps tables in the connection's default schema (required for SQLite)
SCHEMA: Optional[str] = os.getenv("DB_SCHEMA") or None

JWT_SECRET = os.getenv("JWT_SECRET")
if not JWT_SECRET:
    raise ValueError("JWT_SECRET must be set in the environment")

JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
]

# Hard deadlines for partner calls, in seconds
SYNC_TIMEOUT_SECONDS = float(os.getenv("OTA_SYNC_TIMEOUT_SECONDS", "30"))
TEST_CONNECTION_TIMEOUT_SECONDS = float(os.getenv("OTA_TEST_TIMEOUT_SECONDS", "15"))

MAX_RETRIES = int(os.getenv("OTA_MAX_RETRIES", "2"))
MAX_CONCURRENT_SYNCS = int(os.getenv("OTA_MAX_CONCURRENT_SYNCS", "8"))

_deadline_raw = os.getenv("OTA_SYNC_ALL_DEADLINE_SECONDS")
SYNC_ALL_DEADLINE_SECONDS: Optional[float] = float(_deadline_raw) if _deadline_raw else None

HOTEL_NAME = os.getenv("HOTEL_NAME", "Grand Hotel")
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

MAX_LOG_MESSAGE_LENGTH = 2000
