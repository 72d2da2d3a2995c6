import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

BACKEND_CONFIG = {
    "url": os.getenv("BACKEND_URL", "http://localhost:54321"),
    "api_key": os.getenv("BACKEND_API_KEY", ""),
    "timeout": float(os.getenv("BACKEND_TIMEOUT", "30")),
}

TIMEZONE = os.getenv("TIMEZONE", "Asia/Kolkata")
MINIMUM_VALID_HOURS = float(os.getenv("MINIMUM_VALID_HOURS", "6"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
