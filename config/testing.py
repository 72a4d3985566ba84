from .base import env_db_config

SECRET_KEY = "test-secret"
DB_CONFIG = env_db_config("labor_reports_test")

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
OVERTIME_WARNING_HOURS = 12

# Tests inject an in-memory store; never touch MySQL on startup.
AUTO_INIT_DB = False
