"""Authentication information for gdriveaudit."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

_REQUIRED_KEYS: dict[str, tuple[str, ...]] = {
    "oauth": ("client_secrets_file", "token_file"),
    "service_account": ("key_file",),
}


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Supported kinds:
        kind = "oauth"
            data: client_secrets_file, token_file
        kind = "service_account"
            data: key_file, optional subject (user to impersonate with
            domain-wide delegation; needed to audit a whole domain)
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in _REQUIRED_KEYS:
            raise ValueError(
                f"AuthInfo.kind must be one of {sorted(_REQUIRED_KEYS)}, got {self.kind!r}"
            )

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        for key in _REQUIRED_KEYS[self.kind]:
            value = self.data.get(key)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @property
    def client_secrets_file(self) -> str:
        """Path to OAuth client secrets JSON."""
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        """Path to OAuth token JSON (authorized user)."""
        return str(self.data["token_file"])

    @property
    def key_file(self) -> str:
        """Path to the service account key JSON."""
        return str(self.data["key_file"])

    @property
    def subject(self) -> Optional[str]:
        value = self.data.get("subject")
        return value if isinstance(value, str) and value.strip() else None
