import os

from .config import DB_CONFIG, DEFAULT_TIMEZONE, LOG_LEVEL, OVERTIME_THRESHOLD_MINUTES, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
