import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rollcall_test"),
}
DB_POOL_SIZE = 4

DEBUG = False
TESTING = True

API_PREFIX = "/api"
PORT = 3000

CORS_ORIGINS = "*"
RATE_LIMIT = "200 per 15 minutes"
RATELIMIT_ENABLED = False
MAX_UPLOAD_MB = 1

LOG_LEVEL = "WARNING"
LOG_JSON = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
