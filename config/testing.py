import os

SECRET_KEY = "test-secret"

API_BASE = os.getenv("API_BASE", "http://backend.test")
API_TIMEOUT = 2.0

FETCH_MAX_WORKERS = 4
MONTHLY_REPORT_TIMEOUT = 5.0

CACHE_ENABLED = False

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
