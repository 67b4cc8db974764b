"""Credential loading and Drive service construction for gdriveaudit."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Sequence

from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from gdriveaudit.errors import AuthError, InvalidArgumentError
from gdriveaudit.logging_config import get_logger

from .auth_info import AuthInfo

logger = get_logger(__name__)


class OAuthClient:
    """Create credentials and Drive API service objects from AuthInfo."""

    def __init__(self, auth_info: AuthInfo) -> None:
        self._auth_info = auth_info

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True) -> Any:
        """
        Return credentials for the given scopes.

        For "oauth", a stored token is reused (and refreshed when expired);
        the interactive flow runs only when no usable token exists.

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        scope_list = list(scopes)
        if self._auth_info.kind == "service_account":
            return self._service_account_credentials(scope_list)

        creds = self._load_token(scope_list)
        if creds is not None and not ensure_valid:
            return creds
        if creds is not None and not creds.valid and creds.refresh_token:
            self._refresh(creds)
        if creds is not None and creds.valid:
            return creds
        return self._run_flow(scope_list)

    def build_drive_service(self, scopes: Sequence[str], ensure_valid: bool = True) -> Any:
        """
        Build a Drive API v3 service resource.

        Returns:
            googleapiclient.discovery.Resource
        """
        creds = self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        try:
            return build("drive", "v3", credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError("Failed to build Drive service", cause=exc) from exc

    def _service_account_credentials(self, scopes: list[str]) -> Any:
        key_file = self._auth_info.key_file
        try:
            creds = service_account.Credentials.from_service_account_file(key_file, scopes=scopes)
        except Exception as exc:
            raise AuthError(
                "Failed to load service account key",
                details={"key_file": key_file},
                cause=exc,
            ) from exc

        subject = self._auth_info.subject
        if subject:
            logger.debug(f"Service account delegating to {subject}")
            return creds.with_subject(subject)
        return creds

    def _load_token(self, scopes: list[str]) -> Optional[Credentials]:
        token_file = self._auth_info.token_file
        if not Path(token_file).exists():
            return None
        try:
            return Credentials.from_authorized_user_file(token_file, scopes=scopes)
        except Exception as exc:
            raise AuthError(
                "Failed to load token_file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc

    def _refresh(self, creds: Credentials) -> None:
        try:
            creds.refresh(Request())
        except Exception as exc:
            raise AuthError(
                "Failed to refresh OAuth credentials",
                details={"token_file": self._auth_info.token_file},
                cause=exc,
            ) from exc
        logger.debug("OAuth token refreshed")
        self._save_credentials(creds)

    def _run_flow(self, scopes: list[str]) -> Any:
        client_secrets = self._auth_info.client_secrets_file
        logger.info("No usable OAuth token; starting browser authorization")
        try:
            flow = InstalledAppFlow.from_client_secrets_file(client_secrets, scopes=scopes)
            creds = flow.run_local_server(port=0)
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": self._auth_info.token_file,
                },
                cause=exc,
            ) from exc
        self._save_credentials(creds)
        return creds

    def _save_credentials(self, creds: Any) -> None:
        path = Path(self._auth_info.token_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(creds.to_json(), encoding="utf-8")
        except OSError as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": str(path)},
                cause=exc,
            ) from exc
