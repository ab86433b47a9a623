"""Application configuration and settings."""
import os
from dotenv import load_dotenv

# Load environment variables from .env (if present)
load_dotenv()

# Database configuration
SQLALCHEMY_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./policies.db")

# Security configuration - REQUIRED for the cache administration endpoints
ADMIN_API_KEY = os.environ.get("ADMIN_API_KEY")
if not ADMIN_API_KEY:
    raise ValueError(
        "ADMIN_API_KEY environment variable is required. "
        "Please set it in your .env file or environment variables."
    )

# Filtered-list cache region: bounded and time-expiring
FILTERED_CACHE_MAX_SIZE = int(os.getenv("FILTERED_CACHE_MAX_SIZE", "100"))
FILTERED_CACHE_TTL_SECONDS = float(os.getenv("FILTERED_CACHE_TTL_SECONDS", "600"))

# Paging
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

# Logging
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Largest id or row offset the store accepts (signed 64-bit INTEGER)
MAX_RECORD_ID = 2**63 - 1
