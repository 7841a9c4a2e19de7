from .config import DB_CONFIG, DEFAULT_TIMEZONE, OVERTIME_THRESHOLD_MINUTES

SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True

LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False
