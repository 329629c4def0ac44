# room_relay/schemas/session.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Peer(BaseModel):
    """
    One connection of a user to a session.

    The same `user_id` shows up once per (re)connect, so it is not unique
    within a session.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    user_id: str = Field(..., description="Identity of the connected user.")
    name: str | None = Field(None, description="Display name used for this connection.")
    joined_at: datetime = Field(..., description="When the peer joined the session.")
    left_at: datetime | None = Field(
        None,
        description="When the peer left. Missing while the peer is still connected.",
    )

    @field_validator("joined_at", "left_at")
    @classmethod
    def _normalize_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class Session(BaseModel):
    """
    A session record as returned by the Resource API ``/sessions`` listing.

    Only the fields the usage analytics needs are typed; everything else is
    kept as extra data.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    id: str = Field(..., description="Session identifier.")
    created_at: datetime = Field(..., description="Session start (first peer joined).")
    updated_at: datetime = Field(..., description="Last update of the session record.")
    peers: Dict[str, Peer] = Field(
        default_factory=dict,
        description="Peer records keyed by peer id.",
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class UserDurationSummary(BaseModel):
    """
    Total connected time of one user across all of their peer records.
    """

    name: str | None = Field(
        None,
        description="Display name of the last peer record seen for this user.",
        examples=["Alice"],
    )
    user_id: str = Field(..., examples=["user-123"])
    duration_minutes: float = Field(
        ...,
        description=(
            "Sum of every peer record's duration in minutes, each record rounded "
            "to 2 decimals (half away from zero) before being added."
        ),
        examples=[7.01],
    )


class SessionAnalytics(BaseModel):
    """
    Usage analytics for a single session.
    """

    user_duration_list: List[UserDurationSummary] = Field(
        default_factory=list,
        description="One entry per distinct user_id, in first-seen order.",
    )
    session_duration: str = Field(
        ...,
        description="Wall-clock span of the session record in minutes, 2 decimals.",
        examples=["12.00"],
    )
    total_peer_duration: str = Field(
        ...,
        description="Sum of all per-user durations in minutes, 2 decimals.",
        examples=["21.50"],
    )
