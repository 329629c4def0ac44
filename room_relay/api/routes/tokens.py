# room_relay/api/routes/tokens.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from http import HTTPStatus

from room_relay.api.dependencies.providers import token_service_dependency
from room_relay.core.errors import TokenIssuanceError
from room_relay.schemas.room import AuthTokenRequest, AuthTokenResponse
from room_relay.services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Tokens"])


@router.post(
    "/auth-token",
    response_model=AuthTokenResponse,
    summary="Issue an auth token for joining a room",
    description="Signs a token that lets `user_id` join `room_id` with `role`.",
)
async def issue_auth_token(
    payload: AuthTokenRequest,
    tokens: TokenService = Depends(token_service_dependency),
):
    try:
        token = tokens.get_auth_token(
            room_id=payload.room_id,
            user_id=payload.user_id,
            role=payload.role,
        )
    except TokenIssuanceError as exc:
        logger.error("Failed to issue auth token for room %s: %s", payload.room_id, exc)
        return PlainTextResponse("Internal Server Error", status_code=HTTPStatus.INTERNAL_SERVER_ERROR)

    return AuthTokenResponse(token=token)
