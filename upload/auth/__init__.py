"""
Authentication Package

Refresh-token based OAuth 2.0 credentials for the shared YouTube channel,
plus the one-off browser flow used to mint the refresh token.
"""

from upload.auth.oauth_manager import OAuthManager, run_initial_auth

__all__ = [
    "OAuthManager",
    "run_initial_auth",
]
