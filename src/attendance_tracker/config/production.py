import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_tracker"),
}

DEBUG = False

STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = bool(int(os.getenv("LOG_TO_FILE", "1")))
LOG_FILE_PATH = os.getenv("LOG_FILE_PATH", "logs/attendance_tracker.log")

EXPORT_FETCH_SIZE = int(os.getenv("EXPORT_FETCH_SIZE", "1000"))
