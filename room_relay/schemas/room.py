# room_relay/schemas/room.py
from __future__ import annotations

from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    """
    Payload accepted by POST /create-room and forwarded to the provider.
    """

    name: str | None = Field(None, description="Unique room name.", examples=["daily-standup"])
    description: str | None = Field(None, description="Free-form room description.")
    template_id: str | None = Field(
        None,
        description="Template whose roles and settings the room inherits.",
    )
    region: str | None = Field(None, description="Preferred media region.", examples=["in"])


class AuthTokenRequest(BaseModel):
    """
    Payload for POST /auth-token.
    """

    room_id: str = Field(..., min_length=1, description="Room the client wants to join.")
    user_id: str = Field(..., min_length=1, description="Caller's own user identifier.")
    role: str = Field(..., min_length=1, description="Role to join with.", examples=["guest"])


class AuthTokenResponse(BaseModel):
    token: str = Field(..., description="Signed token the client presents to join.")
    msg: str = Field("Token generated successfully!")
    success: bool = Field(True)
