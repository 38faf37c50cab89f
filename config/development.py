import os

from config.config import Config

DB_CONFIG = Config.db_config()

REDIS_URL = Config.REDIS_URL
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

DEBUG = True

# If enabled, schema.sql is applied on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

STATISTICS = Config.statistics_timings()
