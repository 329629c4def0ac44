# tests/test_token_service.py
import jwt
import pytest

from room_relay.core.errors import TokenIssuanceError
from room_relay.services.token_service import TokenService


def _decode(token: str) -> dict:
    return jwt.decode(token, "app-secret-0123456789abcdef0123456789", algorithms=["HS256"])


def test_management_token_is_cached(token_service):
    """
    Consecutive calls inside the token lifetime return the same token.
    """
    first = token_service.get_management_token()
    second = token_service.get_management_token()

    assert first == second
    claims = _decode(first)
    assert claims["type"] == "management"
    assert claims["access_key"] == "access-key-123"
    assert claims["version"] == 2
    assert claims["exp"] > claims["iat"]


def test_management_token_is_reminted_near_expiry():
    """
    A lifetime shorter than the refresh margin forces a fresh token each call.
    """
    service = TokenService(
        access_key="access-key-123",
        app_secret="app-secret-0123456789abcdef0123456789",
        management_ttl_seconds=30,
    )

    first = service.get_management_token()
    second = service.get_management_token()

    assert first != second


def test_auth_token_encodes_room_user_and_role(token_service):
    token = token_service.get_auth_token(room_id="room-1", user_id="user-1", role="guest")

    claims = _decode(token)
    assert claims["type"] == "app"
    assert claims["room_id"] == "room-1"
    assert claims["user_id"] == "user-1"
    assert claims["role"] == "guest"


@pytest.mark.parametrize("missing", ["room_id", "user_id", "role"])
def test_auth_token_requires_all_fields(token_service, missing):
    fields = {"room_id": "room-1", "user_id": "user-1", "role": "guest"}
    fields[missing] = None

    with pytest.raises(TokenIssuanceError) as exc_info:
        token_service.get_auth_token(**fields)

    assert missing in str(exc_info.value)


def test_token_service_requires_credentials():
    with pytest.raises(ValueError):
        TokenService(access_key="", app_secret="secret")
