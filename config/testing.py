import os

SECRET_KEY = "test-secret"

BACKEND_CONFIG = {
    "url": os.getenv("BACKEND_URL", "http://backend.test"),
    "api_key": os.getenv("BACKEND_API_KEY", "test-key"),
    "timeout": 5.0,
}

TIMEZONE = "Asia/Kolkata"
MINIMUM_VALID_HOURS = 6.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
