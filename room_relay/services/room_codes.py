# room_relay/services/room_codes.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from room_relay.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class GuestRoomCodeEnricher:
    """
    Attaches each room's guest room codes to a room listing.

    One ``GET /room-codes/room/{room_id}`` is issued per room, all of them
    concurrently, and the listing is rebuilt only once every sub-request has
    settled. A failed lookup degrades that room alone: it gets an empty
    ``guest_room_codes`` list plus a ``guest_room_codes_error`` message,
    while its siblings are unaffected. Nothing is retried.
    """

    codes_field = "guest_room_codes"
    error_field = "guest_room_codes_error"

    def __init__(self, resource_api, guest_role: str = "guest") -> None:
        self.api = resource_api
        self.guest_role = guest_role

    async def enrich(
        self, rooms: Optional[List[Dict[str, Any]]]
    ) -> Optional[List[Dict[str, Any]]]:
        """
        Return the rooms, in input order, each carrying its guest room codes.

        An empty or missing listing is returned as-is without any request.
        """
        if not rooms:
            return rooms

        # gather() keeps positional order no matter which lookup finishes first.
        enriched = await asyncio.gather(*(self._enrich_room(room) for room in rooms))
        return list(enriched)

    async def _enrich_room(self, room: Dict[str, Any]) -> Dict[str, Any]:
        room_id = room.get("id")
        try:
            payload = await self._fetch_room_codes(room_id)
        except UpstreamError as exc:
            logger.warning("Failed to fetch room codes for room %s: %s", room_id, exc)
            return {**room, self.codes_field: [], self.error_field: str(exc)}

        if not isinstance(payload, dict):
            logger.warning("Unexpected room codes payload for room %s: %r", room_id, payload)
            return {
                **room,
                self.codes_field: [],
                self.error_field: f"Unexpected room codes payload for room {room_id}",
            }

        codes = [
            code
            for code in payload.get("data") or []
            if code.get("role") == self.guest_role
        ]
        return {**room, self.codes_field: codes}

    async def _fetch_room_codes(self, room_id: Any) -> Dict[str, Any]:
        return await self.api.get_json(f"/room-codes/room/{room_id}")
