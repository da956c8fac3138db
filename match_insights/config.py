"""
Engine Configuration
Configuration settings for the prediction engine and its command-line driver.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")

# Performance Settings
MAX_WORKERS = int(os.getenv("MAX_WORKERS", "1"))  # 1 = sequential
EXECUTOR_KIND = os.getenv("EXECUTOR_KIND", "thread")  # thread | process

# Output Settings
PAGE_SIZE = int(os.getenv("PAGE_SIZE", "50"))
LEAGUE_AVERAGE_GOALS_FALLBACK = float(os.getenv("LEAGUE_AVERAGE_GOALS_FALLBACK", "2.5"))

# Prediction Store Settings
STORE_TTL_SECONDS = int(os.getenv("STORE_TTL_SECONDS", "10800"))  # 3 hours
REDIS_HOST = os.getenv("REDIS_HOST")  # unset = in-memory only
REDIS_PORT = int(os.getenv("REDIS_PORT", "6379"))
REDIS_PASSWORD = os.getenv("REDIS_PASSWORD")
