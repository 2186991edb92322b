"""
Google OAuth authentication.

Loads the cached token next to config.json, refreshes it when expired and
falls back to the browser consent flow when there is no usable token.

Token storage: <home>/<oauth2_token_file_name>
Credentials:   <home>/<credentials_file_name>
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow

from .config import SCOPES, Config, _info, _warn
from .errors import FatalAbort


def _try_existing_token(token_path: Path) -> Any | None:
    """Load and refresh an existing token if possible.

    Returns valid Credentials or None.
    """
    if not token_path.exists():
        return None

    try:
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)
    except (ValueError, KeyError, json.JSONDecodeError) as exc:
        _warn(f"Could not load token {token_path}: {exc}")
        return None

    if creds.valid:
        return creds

    if creds.expired and creds.refresh_token:
        try:
            creds.refresh(Request())
            _save_token(creds, token_path)
            return creds
        except GoogleAuthError as exc:
            # Token is stale; fall through to full re-auth
            _warn(f"Token refresh failed: {exc}")
            return None

    return None


def _run_consent_flow(credentials_path: Path) -> Any:
    """Run the full OAuth consent flow via the system browser.

    Opens a browser window and starts a temporary localhost HTTP server
    on a random port to capture the redirect.
    """
    if not credentials_path.exists():
        raise FatalAbort(
            f"Google credentials not found at {credentials_path}. "
            "Download an OAuth 2.0 Desktop App client from Google Cloud Console "
            f"and save it as {credentials_path}"
        )

    # Validate the credentials file before using it
    try:
        with open(credentials_path) as f:
            creds_data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise FatalAbort(f"Failed to read credentials file {credentials_path}: {exc}")

    if "installed" not in creds_data:
        hint = (
            " This looks like a Web Application credential. Use Desktop App type instead."
            if "web" in creds_data
            else ""
        )
        raise FatalAbort(
            f"Invalid credentials file format.{hint} "
            "Expected 'installed' key for Desktop App OAuth credentials."
        )

    try:
        flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), SCOPES)
        # port=0 lets the OS pick a random available port
        return flow.run_local_server(port=0)
    except Exception as exc:
        raise FatalAbort(f"OAuth consent flow failed: {exc}")


def _save_token(creds: Any, token_path: Path) -> None:
    """Persist credentials to disk with secure permissions."""
    try:
        token_path.parent.mkdir(parents=True, exist_ok=True)
        with open(token_path, "w") as f:
            f.write(creds.to_json())
        os.chmod(token_path, 0o600)
    except OSError as exc:
        raise FatalAbort(f"Unable to cache oauth token at {token_path}: {exc}")


def get_credentials(config: Config) -> Any:
    """Return valid user credentials for the configured account."""
    creds = _try_existing_token(config.token_path)

    if creds is None:
        # No valid token -- run full browser consent flow
        _info("No cached Google token; opening browser for consent")
        creds = _run_consent_flow(config.credentials_path)
        _save_token(creds, config.token_path)

    return creds
