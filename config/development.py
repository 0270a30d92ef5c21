import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

# School REST backend serving /api/attendance and /api/students
API_BASE = os.getenv("API_BASE", "http://localhost:5000")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

# Monthly reports fan out one fetch per day of the month
FETCH_MAX_WORKERS = int(os.getenv("FETCH_MAX_WORKERS", "8"))
MONTHLY_REPORT_TIMEOUT = float(os.getenv("MONTHLY_REPORT_TIMEOUT", "60"))

CACHE_ENABLED = bool(int(os.getenv("CACHE_ENABLED", "0")))
CACHE_TTL = float(os.getenv("CACHE_TTL", "60"))
CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "1024"))

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
