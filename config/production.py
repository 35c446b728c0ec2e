import os

from .config import Config

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DB_CONFIG = Config.db_config()

DEBUG = False
LOG_LEVEL = Config.LOG_LEVEL

HOURS_PER_DAY = Config.HOURS_PER_DAY
SUBMISSION_TOLERANCE_HOURS = Config.SUBMISSION_TOLERANCE_HOURS

AUTO_INIT_DB = Config.AUTO_INIT_DB
AUTO_SEED_DB = Config.AUTO_SEED_DB
