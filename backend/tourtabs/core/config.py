import os
from dotenv import load_dotenv

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8000/api").rstrip("/")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

SESSION_COOKIE = os.getenv("SESSION_COOKIE", "access_token")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 8)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
