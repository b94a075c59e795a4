# src/chainscan/utils/config.py

class Config:
    # Scan configuration
    DEFAULT_BLOCK_COUNT = 1000
    PREFETCH_WORKERS = 1  # 1 = strictly sequential fetches

    # RPC configuration
    DEFAULT_RPC_URL = "https://bsc-dataseed1.binance.org"
    RPC_TIMEOUT = 30  # seconds

    # Retry configuration (1 attempt = fail fast)
    MAX_ATTEMPTS = 1
    RETRY_BACKOFF_BASE = 0.5  # seconds
    MAX_RETRY_BACKOFF = 8.0  # seconds

    # Monitoring configuration
    METRICS_NAMESPACE = "chainscan"
    LOG_LEVEL = "INFO"
    LOG_MAX_SIZE = 10 * 1024 * 1024  # 10MB
    LOG_BACKUP_COUNT = 5
