# room_relay/services/token_service.py
from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from room_relay.core.config import get_settings
from room_relay.core.errors import TokenIssuanceError


@dataclass
class _TokenState:
    token: str
    expires_at: datetime


class TokenService:
    """
    Mints the two kinds of credentials the video provider accepts.

    Responsibilities
    ----------------
    - Management tokens authorize this service's own Resource API calls.
      They are cached in memory and re-minted shortly before expiry.
    - Auth tokens are handed to clients so they can join a room with a given
      role. They are never cached.

    Both are HS256 JWTs signed with the workspace app secret.
    """

    # Re-mint the management token this long before it really expires.
    REFRESH_MARGIN_SECONDS = 60

    def __init__(
        self,
        access_key: str,
        app_secret: str,
        management_ttl_seconds: int = 24 * 3600,
        auth_ttl_seconds: int = 24 * 3600,
    ) -> None:
        if not access_key or not app_secret:
            raise ValueError("access_key and app_secret are required")

        self._access_key = access_key
        self._app_secret = app_secret
        self._management_ttl = timedelta(seconds=management_ttl_seconds)
        self._auth_ttl = timedelta(seconds=auth_ttl_seconds)

        self._management_state: Optional[_TokenState] = None

    def _sign(self, claims: Dict[str, Any], ttl: timedelta) -> _TokenState:
        now = datetime.now(tz=timezone.utc)
        expires_at = now + ttl
        payload = {
            "access_key": self._access_key,
            "version": 2,
            "iat": int(now.timestamp()),
            "nbf": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
            "jti": str(uuid.uuid4()),
            **claims,
        }
        try:
            token = jwt.encode(payload, self._app_secret, algorithm="HS256")
        except jwt.PyJWTError as exc:
            raise TokenIssuanceError(f"Failed to sign token: {exc}") from exc
        return _TokenState(token=token, expires_at=expires_at)

    def get_management_token(self) -> str:
        """
        Return a valid management token, using the cached one while it is
        still comfortably inside its lifetime.
        """
        now = datetime.now(tz=timezone.utc)
        margin = timedelta(seconds=self.REFRESH_MARGIN_SECONDS)
        if self._management_state and self._management_state.expires_at - margin > now:
            return self._management_state.token

        self._management_state = self._sign({"type": "management"}, self._management_ttl)
        return self._management_state.token

    def get_auth_token(
        self,
        room_id: Optional[str],
        user_id: Optional[str],
        role: Optional[str],
    ) -> str:
        """
        Mint a token that lets `user_id` join `room_id` with `role`.

        Raises TokenIssuanceError when any of the three inputs is missing.
        """
        missing = [
            name
            for name, value in (("room_id", room_id), ("user_id", user_id), ("role", role))
            if not value
        ]
        if missing:
            raise TokenIssuanceError(f"Missing required token fields: {', '.join(missing)}")

        claims = {
            "type": "app",
            "room_id": room_id,
            "user_id": user_id,
            "role": role,
        }
        return self._sign(claims, self._auth_ttl).token


_token_service_instance: Optional[TokenService] = None


def get_token_service() -> TokenService:
    """
    Lazily construct the shared TokenService from application settings.
    """
    global _token_service_instance
    if _token_service_instance is None:
        settings = get_settings()
        if not settings.HMS_ACCESS_KEY or not settings.HMS_APP_SECRET:
            raise TokenIssuanceError(
                "HMS_ACCESS_KEY and HMS_APP_SECRET must be configured in settings "
                "to issue provider tokens."
            )
        _token_service_instance = TokenService(
            access_key=settings.HMS_ACCESS_KEY,
            app_secret=settings.HMS_APP_SECRET,
            management_ttl_seconds=settings.MANAGEMENT_TOKEN_TTL_SECONDS,
            auth_ttl_seconds=settings.AUTH_TOKEN_TTL_SECONDS,
        )
    return _token_service_instance
