"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (bot token, OAuth client secret, refresh token) should be in .env, NOT here
- Import these settings in modules: from config.settings import WORKER_TICK_INTERVAL
- Every value can be overridden from the environment
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _optional_int(name: str) -> Optional[int]:
    """Read an optional positive integer from the environment (unset/0 = None)"""
    value = os.getenv(name, "").strip()
    if not value:
        return None
    parsed = int(value)
    return parsed if parsed > 0 else None


# =============================================================================
# UPLOAD WORKER CONFIGURATION
# =============================================================================

# Orchestrator tick: how often pending jobs are scanned (seconds)
WORKER_TICK_INTERVAL = float(os.getenv("WORKER_TICK_INTERVAL", "5"))

# Processing status polling: wait for check n = min(BASE * 2^n, CAP)
PROCESSING_BACKOFF_BASE = float(os.getenv("PROCESSING_BACKOFF_BASE", "5"))
PROCESSING_BACKOFF_CAP = float(os.getenv("PROCESSING_BACKOFF_CAP", "60"))

# Give up on a video that never finishes processing (unset = poll forever)
PROCESSING_MAX_CHECKS = _optional_int("PROCESSING_MAX_CHECKS")

# Evict finished jobs from the ledger after this many hours (unset = keep)
JOB_RETENTION_HOURS = _optional_int("JOB_RETENTION_HOURS")

# =============================================================================
# TOKEN REFRESH CONFIGURATION
# =============================================================================

TOKEN_REFRESH_INTERVAL_HOURS = float(os.getenv("TOKEN_REFRESH_INTERVAL_HOURS", "24"))
TOKEN_REFRESH_WARMUP_HOURS = float(os.getenv("TOKEN_REFRESH_WARMUP_HOURS", "1"))

# Rotated refresh tokens are written here for the operator to pick up
TOKEN_LOG_PATH = Path(
    os.getenv(
        "TOKEN_LOG_PATH",
        str(Path(tempfile.gettempdir()) / "youtube-refresh-token.txt"),
    ),
)

# =============================================================================
# INTAKE CONFIGURATION
# =============================================================================

UPLOAD_MAX_FILE_SIZE_BYTES = int(
    os.getenv("UPLOAD_MAX_FILE_SIZE_BYTES", str(2 * 1024 * 1024 * 1024)),  # 2 GB
)
UPLOAD_TEMP_PATH = Path(
    os.getenv(
        "UPLOAD_TEMP_PATH",
        str(Path(tempfile.gettempdir()) / "ddclipbot-uploads"),
    ),
)

# =============================================================================
# VIDEO METADATA CONFIGURATION
# =============================================================================

DEFAULT_VIDEO_TAGS = ["gaming", "clip"]
DEFAULT_PRIVACY_STATUS = "unlisted"  # public, private, or unlisted
YOUTUBE_CATEGORY_ID = "20"  # 20 = Gaming

# Upload Settings
UPLOAD_CHUNK_SIZE = 10 * 1024 * 1024  # 10 MB chunks (multiple of 256 KB)
UPLOAD_MAX_CHUNK_RETRIES = 10

# =============================================================================
# DISCORD CONFIGURATION
# =============================================================================

DISCORD_API_BASE = "https://discord.com/api/v10"
DISCORD_HTTP_TIMEOUT = 15  # seconds
DISCORD_TEXT_CHANNEL_TYPE = 0

# Guild whose text channels are offered as publish targets
DISCORD_GUILD_ID = os.getenv("DISCORD_GUILD_ID", "")

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

LOG_DIR = os.getenv("LOG_DIR", "./logs")
LOG_SERVICE_FILE = "service.log"

# =============================================================================
# SECRETS (loaded from .env)
# =============================================================================
# IMPORTANT: These should NEVER be committed to version control!
# Create a .env file in the project root with these values

YOUTUBE_CLIENT_ID = os.getenv("YOUTUBE_CLIENT_ID", "")
YOUTUBE_CLIENT_SECRET = os.getenv("YOUTUBE_CLIENT_SECRET", "")
YOUTUBE_REFRESH_TOKEN = os.getenv("YOUTUBE_REFRESH_TOKEN", "")

# Only used by setup_youtube_auth.py to mint the refresh token
YOUTUBE_CLIENT_SECRET_PATH = os.getenv(
    "YOUTUBE_CLIENT_SECRET_PATH",
    "credentials/client_secret.json",
)

DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN", "")
