"""Application configuration loaded from the environment."""

import os
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

NAME_APP = os.getenv("NAME_APP", "BlogAPI")
APP_ENV = os.getenv("APP_ENV", "development")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
LOG_FILE = os.getenv("LOG_FILE", "blog_api.log")
PORT = os.getenv("PORT", "8000")

# JWT configuration
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
if not JWT_SECRET_KEY:
    raise ValueError("JWT_SECRET_KEY must be set in .env file")

ALGORITHM = "HS256"
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", str(60 * 24 * 7)))
TOKEN_TTL = timedelta(minutes=JWT_EXPIRE_MINUTES)

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Optional admin account created on startup
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

# Origins allowed by CORS in addition to FRONTEND_URL
CORS_ORIGINS = [
    FRONTEND_URL,
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:4173",
    "https://localhost:3000",
    "https://localhost:5173",
    "https://localhost:4173",
]


def is_development() -> bool:
    """Return True when internal error detail may be exposed to clients."""
    return APP_ENV == "development"
