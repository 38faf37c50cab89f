import os


class Config:
    """Environment-driven defaults shared by the settings modules."""

    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "hostel_db")

    # Empty means the in-process statistics cache.
    REDIS_URL = os.environ.get("REDIS_URL", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    STATISTICS_CACHE_TTL_SECONDS = int(os.environ.get("STATISTICS_CACHE_TTL_SECONDS", "30"))
    STATISTICS_LOCK_SECONDS = int(os.environ.get("STATISTICS_LOCK_SECONDS", "15"))
    STATISTICS_POLL_INTERVAL_MS = int(os.environ.get("STATISTICS_POLL_INTERVAL_MS", "100"))
    STATISTICS_MAX_WAIT_MS = int(os.environ.get("STATISTICS_MAX_WAIT_MS", "3000"))

    @classmethod
    def db_config(cls) -> dict:
        return {
            "host": cls.DB_HOST,
            "port": cls.DB_PORT,
            "user": cls.DB_USER,
            "password": cls.DB_PASSWORD,
            "database": cls.DB_NAME,
        }

    @classmethod
    def statistics_timings(cls) -> dict:
        return {
            "cache_ttl_seconds": cls.STATISTICS_CACHE_TTL_SECONDS,
            "lock_seconds": cls.STATISTICS_LOCK_SECONDS,
            "poll_interval_ms": cls.STATISTICS_POLL_INTERVAL_MS,
            "max_wait_ms": cls.STATISTICS_MAX_WAIT_MS,
        }
