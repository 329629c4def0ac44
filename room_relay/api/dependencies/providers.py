# room_relay/api/dependencies/providers.py
from fastapi import HTTPException, status

from room_relay.core.errors import TokenIssuanceError
from room_relay.services.resource_api import ResourceApiClient, get_resource_api
from room_relay.services.token_service import TokenService, get_token_service


async def resource_api_dependency() -> ResourceApiClient:
    """
    Provide the shared Resource API client.

    Missing provider credentials are a deployment problem, so they surface
    as 500 instead of leaking a traceback.
    """
    try:
        return get_resource_api()
    except TokenIssuanceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc


async def token_service_dependency() -> TokenService:
    """
    Provide the shared TokenService.
    """
    try:
        return get_token_service()
    except TokenIssuanceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
