#!/usr/bin/env python3
"""
YouTube Authentication Setup Script

Run this ONCE, as the owner of the shared YouTube channel, to obtain the
refresh token the service uses. Put the printed value in .env as
YOUTUBE_REFRESH_TOKEN.

Usage:
    python setup_youtube_auth.py

Requirements:
    1. client_secret.json (Desktop app OAuth client) from Google Cloud Console
    2. .env file with YOUTUBE_CLIENT_SECRET_PATH
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def load_env_file():
    """Load environment variables from .env file"""
    if not os.path.exists(".env"):
        logger.warning("⚠️  .env file not found, using environment and defaults")
        return

    load_dotenv()
    logger.info("✅ Loaded environment from .env")


def validate_credentials() -> str:
    """Validate client_secret.json exists"""
    # Import settings after .env is loaded
    from config import settings

    client_secret_path = settings.YOUTUBE_CLIENT_SECRET_PATH

    if not os.path.exists(client_secret_path):
        logger.error(f"❌ client_secret.json not found: {client_secret_path}")
        logger.info("\nTo get client_secret.json:")
        logger.info("1. Go to: https://console.cloud.google.com/apis/credentials")
        logger.info("2. Create OAuth 2.0 Client ID (Desktop app)")
        logger.info("3. Download JSON file")
        logger.info(f"4. Save to: {client_secret_path}")
        sys.exit(1)

    logger.info(f"✅ Found client_secret.json: {client_secret_path}")
    return client_secret_path


def run_authentication(client_secret_path: str):
    """Run OAuth authentication flow and print the refresh token"""
    from upload.auth.oauth_manager import run_initial_auth

    logger.info("\n" + "=" * 60)
    logger.info("Starting YouTube Authentication")
    logger.info("=" * 60)
    logger.info("\nSteps:")
    logger.info("1. Browser will open automatically")
    logger.info("2. Log in to the Google account that owns the channel")
    logger.info("3. Grant upload and read permissions")
    logger.info("4. The refresh token is printed below")
    logger.info("\nPress Enter to continue...")
    input()

    refresh_token = run_initial_auth(client_secret_path=client_secret_path)

    if not refresh_token:
        logger.error("\n" + "=" * 60)
        logger.error("❌ AUTHENTICATION FAILED")
        logger.error("=" * 60)
        logger.error("\nTroubleshooting:")
        logger.error("1. Check client_secret.json is valid")
        logger.error("2. Ensure OAuth consent screen is configured")
        logger.error("3. Revoke the app at https://myaccount.google.com/permissions and retry")
        sys.exit(1)

    logger.info("\n" + "=" * 60)
    logger.info("✅ AUTHENTICATION SUCCESSFUL!")
    logger.info("=" * 60)
    logger.info("\nAdd this line to .env:")
    print(f"\nYOUTUBE_REFRESH_TOKEN={refresh_token}\n")
    logger.info("⚠️  Keep the refresh token secret - it grants upload access to the channel!")


def main():
    """Main setup flow"""
    logger.info("=" * 60)
    logger.info("YouTube Authentication Setup")
    logger.info("=" * 60)

    logger.info("\n[Step 1/3] Loading configuration...")
    load_env_file()

    logger.info("\n[Step 2/3] Validating client_secret.json...")
    client_secret_path = validate_credentials()

    logger.info("\n[Step 3/3] Running authentication flow...")
    run_authentication(client_secret_path)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("\n\n❌ Setup cancelled by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"\n\n❌ Unexpected error: {e}", exc_info=True)
        sys.exit(1)
