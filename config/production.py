import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_BASE = os.getenv("API_BASE", "http://localhost:5000")
API_TIMEOUT = float(os.getenv("API_TIMEOUT", "10"))

FETCH_MAX_WORKERS = int(os.getenv("FETCH_MAX_WORKERS", "8"))
MONTHLY_REPORT_TIMEOUT = float(os.getenv("MONTHLY_REPORT_TIMEOUT", "30"))

# Per-process cache; writes from other workers show up after CACHE_TTL seconds
CACHE_ENABLED = bool(int(os.getenv("CACHE_ENABLED", "0")))
CACHE_TTL = float(os.getenv("CACHE_TTL", "30"))
CACHE_MAX_ENTRIES = int(os.getenv("CACHE_MAX_ENTRIES", "1024"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
