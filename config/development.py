import os

from .base import env_db_config, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
DB_CONFIG = env_db_config("labor_reports_db")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Daily totals above this are flagged, never rejected
OVERTIME_WARNING_HOURS = float(os.getenv("OVERTIME_WARNING_HOURS", "12"))

# Apply database/schema.sql on startup (CREATE TABLE IF NOT EXISTS only)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", True)
