import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    # ------------------------
    # Remote booking API
    # ------------------------
    API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3002").rstrip("/")
    # Seconds; bounds the single booking attempt, nothing is retried
    REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "30"))

    # ------------------------
    # Web
    # ------------------------
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
    PORT = int(os.getenv("PORT", "8000"))

    # ------------------------
    # Logging
    # ------------------------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    LOG_FILE = os.getenv("LOG_FILE")
