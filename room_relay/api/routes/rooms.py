# room_relay/api/routes/rooms.py
import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Path
from fastapi.responses import JSONResponse
from http import HTTPStatus

from room_relay.api.dependencies.providers import resource_api_dependency
from room_relay.core.config import get_settings
from room_relay.core.errors import InvalidRequestError, UpstreamError
from room_relay.schemas.room import RoomCreate
from room_relay.services.resource_api import ResourceApiClient
from room_relay.services.room_codes import GuestRoomCodeEnricher

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Rooms"])


@router.post(
    "/create-room",
    status_code=HTTPStatus.OK,
    summary="Create a room and its room codes",
    description=(
        "Creates a room on the video provider, then asks the provider to "
        "generate room codes for it.\n\n"
        "Room-code generation is best-effort: when it fails the room is still "
        "returned, just without `room_codes`."
    ),
)
async def create_room(
    payload: RoomCreate,
    api: ResourceApiClient = Depends(resource_api_dependency),
) -> Dict[str, Any]:
    room = await api.post_json("/rooms", json=payload.model_dump(exclude_none=True))

    room_id = room.get("id") if isinstance(room, dict) else None
    if room_id:
        try:
            codes = await api.post_json(f"/room-codes/room/{room_id}", json={})
        except UpstreamError as exc:
            logger.warning("Failed to create room codes for room %s: %s", room_id, exc)
        else:
            room["room_codes"] = codes.get("data")

    return room


@router.get(
    "/list-rooms",
    summary="List rooms with their guest room codes",
    description=(
        "Returns the provider's room listing where every room in `data` also "
        "carries `guest_room_codes`.\n\n"
        "Room codes are looked up concurrently, one request per room. A room "
        "whose lookup fails gets an empty list and a `guest_room_codes_error` "
        "message; the rest of the listing is unaffected."
    ),
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "limit": 10,
                        "data": [
                            {
                                "id": "room-1",
                                "name": "daily-standup",
                                "enabled": True,
                                "guest_room_codes": [
                                    {"code": "abc-defg-hij", "role": "guest", "enabled": True}
                                ],
                            }
                        ],
                    }
                }
            }
        }
    },
)
async def list_rooms(
    api: ResourceApiClient = Depends(resource_api_dependency),
) -> Dict[str, Any]:
    room_list = await api.get_json("/rooms")

    enricher = GuestRoomCodeEnricher(api, guest_role=get_settings().GUEST_ROLE)
    enriched = await enricher.enrich(room_list.get("data"))
    if enriched is not None:
        room_list = {**room_list, "data": enriched}
    return room_list


def _parse_enabled(body: Any) -> bool:
    enabled = body.get("enabled") if isinstance(body, dict) else None
    if not isinstance(enabled, bool):
        raise InvalidRequestError(
            "Invalid 'enabled' status in request body. Must be true or false."
        )
    return enabled


@router.post(
    "/rooms/{room_id}/active",
    summary="Enable or disable a room",
    description=(
        "Expects `{\"enabled\": true}` or `{\"enabled\": false}`. Any other "
        "value is rejected with 400 before the provider is called."
    ),
    responses={
        400: {
            "content": {
                "application/json": {
                    "example": {
                        "error": "Invalid 'enabled' status in request body. Must be true or false."
                    }
                }
            }
        }
    },
)
async def set_room_active(
    room_id: str = Path(..., description="Provider room id."),
    body: Any = Body(default=None),
    api: ResourceApiClient = Depends(resource_api_dependency),
):
    try:
        enabled = _parse_enabled(body)
    except InvalidRequestError as exc:
        return JSONResponse(status_code=HTTPStatus.BAD_REQUEST, content={"error": str(exc)})

    return await api.post_json(f"/rooms/{room_id}", json={"enabled": enabled})
