import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker_test"),
}

DEBUG = False
TESTING = True

STORAGE_BACKEND = "memory"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

LOG_LEVEL = "WARNING"
LOG_TO_FILE = False
LOG_FILE_PATH = "logs/attendance_tracker_test.log"

EXPORT_FETCH_SIZE = 2
