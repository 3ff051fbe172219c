import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return (os.getenv(name) or default).strip().lower() in ("1", "true", "yes", "on")


JWT_SECRET = os.getenv("JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM") or "HS256"
TOKEN_TTL_HOURS = int(os.getenv("TOKEN_TTL_HOURS") or "24")
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS") or "12")

if not JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is not set")

# unset -> in-memory repositories
HOTEL_DB = os.getenv("HOTEL_DB")

RABBIT_URL = os.getenv("RABBIT_URL")  # optional, enables domain events

API_PREFIX = os.getenv("API_PREFIX", "/api")
SEED_DEMO_DATA = _flag("SEED_DEMO_DATA", "true")
PING_MESSAGE = os.getenv("PING_MESSAGE") or "ping"
LOG_LEVEL = (os.getenv("LOG_LEVEL") or "INFO").upper()
CORS_ORIGINS = [o.strip() for o in (os.getenv("CORS_ORIGINS") or "*").split(",") if o.strip()]
