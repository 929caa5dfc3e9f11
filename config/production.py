import os

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "timeclock"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "timeclock_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

GEO_TIMEOUT_SECONDS = float(os.getenv("GEO_TIMEOUT_SECONDS", "10"))
CAPTURE_JPEG_QUALITY = int(os.getenv("CAPTURE_JPEG_QUALITY", "85"))
EXPORT_TIMEZONE = os.getenv("EXPORT_TIMEZONE", "America/Sao_Paulo")
EXPORT_DATE_FORMAT = os.getenv("EXPORT_DATE_FORMAT", "%d/%m/%Y")
EXPORT_TIME_FORMAT = os.getenv("EXPORT_TIME_FORMAT", "%H:%M:%S")
ENFORCE_ALTERNATION = bool(int(os.getenv("ENFORCE_ALTERNATION", "1")))
SESSION_DAYS = int(os.getenv("SESSION_DAYS", "7"))
