import os

from config.config import Config

DB_CONFIG = dict(Config.db_config(), database=os.getenv("DB_NAME", "hostel_db_test"))

REDIS_URL = ""
LOG_LEVEL = "WARNING"

DEBUG = False
TESTING = True

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))

# Short waits keep contention tests fast.
STATISTICS = dict(Config.statistics_timings(), poll_interval_ms=10, max_wait_ms=200)
