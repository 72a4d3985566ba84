import os

from .base import env_db_config, env_flag

SECRET_KEY = os.environ.get("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = env_db_config("labor_reports_db")

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
OVERTIME_WARNING_HOURS = float(os.getenv("OVERTIME_WARNING_HOURS", "12"))
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", False)
