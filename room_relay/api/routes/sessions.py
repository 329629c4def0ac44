# room_relay/api/routes/sessions.py
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query
from http import HTTPStatus

from room_relay.api.dependencies.providers import resource_api_dependency
from room_relay.core.config import get_settings
from room_relay.core.errors import NotFoundError, PaginationLimitExceeded
from room_relay.schemas.session import Session, SessionAnalytics
from room_relay.services.pagination import CursorPaginator
from room_relay.services.resource_api import ResourceApiClient
from room_relay.services.usage_analytics import aggregate_session_usage

router = APIRouter(tags=["Sessions"])


async def _fetch_latest_session(api: ResourceApiClient, room_id: str) -> Session:
    """
    Return the most recent session of a room.

    Raises NotFoundError when the room has no session at all.
    """
    payload = await api.get_json("/sessions", params={"room_id": room_id})
    sessions = payload.get("data") or []
    if not sessions:
        raise NotFoundError("No session found for this room")
    return Session.model_validate(sessions[0])


@router.get(
    "/session-list-by-room",
    response_model=List[Dict[str, Any]],
    summary="List every session of a room",
    description=(
        "Walks the provider's paginated `/sessions` listing (20 per page) and "
        "returns all sessions of the room as one flat list, newest first.\n\n"
        "The walk is all-or-nothing: if any page fails, the whole request "
        "fails with the upstream status."
    ),
    responses={
        502: {"description": "Upstream kept returning full pages past the page bound."},
    },
)
async def list_sessions_by_room(
    room_id: str = Query(..., description="Provider room id."),
    api: ResourceApiClient = Depends(resource_api_dependency),
) -> List[Dict[str, Any]]:
    settings = get_settings()
    paginator = CursorPaginator(
        api,
        "/sessions",
        max_pages=settings.SESSION_LIST_MAX_PAGES,
    )
    try:
        return await paginator.fetch_all({"room_id": room_id})
    except PaginationLimitExceeded as exc:
        raise HTTPException(status_code=HTTPStatus.BAD_GATEWAY, detail=str(exc))


@router.get(
    "/session-analytics-by-room",
    response_model=SessionAnalytics,
    summary="Usage analytics for the latest session of a room",
    description=(
        "Computes, for the room's latest session:\n"
        "- per-user connected minutes (reconnects of the same user are summed)\n"
        "- total connected minutes across all users\n"
        "- wall-clock minutes of the session\n\n"
        "Durations are rounded to 2 decimals, ties away from zero."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "user_duration_list": [
                            {"name": "Alice", "user_id": "user-1", "duration_minutes": 7.01}
                        ],
                        "session_duration": "12.00",
                        "total_peer_duration": "7.01",
                    }
                }
            }
        },
        404: {"description": "The room has no session."},
    },
)
async def session_analytics_by_room(
    room_id: str = Query(..., description="Provider room id."),
    api: ResourceApiClient = Depends(resource_api_dependency),
) -> SessionAnalytics:
    try:
        session = await _fetch_latest_session(api, room_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))

    return aggregate_session_usage(session)
