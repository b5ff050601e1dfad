"""
Application-wide constants and environment-driven configuration.
"""
import os

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/productivity-dashboard"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# Database
DEFAULT_DATABASE_URL = "sqlite:///./dashboard.db"

# Reference time zone used when the settings row has none
DEFAULT_TIMEZONE = os.getenv("DASHBOARD_TIMEZONE", "UTC")

# CORS settings for the React frontend
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "DASHBOARD_CORS_ORIGINS",
        "http://localhost:3000,http://localhost:5173"
    ).split(",")
    if origin.strip()
]

# Series names
SERIES_MIT = "mit"
SERIES_OUTPUT = "output"
SERIES_OUTPUT_TYPE_PREFIX = "output:"
SERIES_DEEP_WORK = "deepwork"

# Period granularity
GRANULARITY_WEEK = "week"
GRANULARITY_MONTH = "month"

# Statistics windows
DEFAULT_WINDOW_SIZE_DAYS = 30
WEEKLY_STATS_LOOKBACK_DAYS = 90
WEEKLY_STATS_LIMIT = 12
MONTHLY_STATS_LIMIT = 6
MIT_WEEKLY_LOOKBACK_DAYS = 28
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_ENTRIES_LIMIT = 50

# Output types
DEFAULT_OUTPUT_COLOR = "blue"

# Deep work
DEFAULT_SESSION_DURATION = 3600  # seconds
