import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "rollcall_db"),
}
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "20"))

DEBUG = False

API_PREFIX = "/api"
PORT = int(os.getenv("PORT", "3000"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
RATE_LIMIT = os.getenv("RATE_LIMIT", "200 per 15 minutes")
RATELIMIT_ENABLED = bool(int(os.getenv("RATELIMIT_ENABLED", "1")))
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_JSON = bool(int(os.getenv("LOG_JSON", "1")))

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
