# room_relay/services/usage_analytics.py
from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

from room_relay.schemas.session import Session, SessionAnalytics, UserDurationSummary

_TWO_PLACES = Decimal("0.01")
_MICROSECONDS_PER_MINUTE = Decimal(60 * 1_000_000)


def minutes_between(start: datetime, end: datetime) -> Decimal:
    """
    Signed number of minutes from `start` to `end`.

    Computed from whole microseconds so values such as 5.005 stay exact and
    round the way a reader expects.
    """
    delta = end - start
    microseconds = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    return Decimal(microseconds) / _MICROSECONDS_PER_MINUTE


def round_half_up(value: Decimal) -> Decimal:
    """
    Round to 2 decimals with ties going away from zero (2.005 -> 2.01,
    -2.005 -> -2.01).
    """
    return value.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)


def format_minutes(value: Decimal) -> str:
    """
    Render minutes with exactly two decimals ("12" -> "12.00").
    """
    return format(round_half_up(value), "f")


def aggregate_session_usage(
    session: Session,
    now: Optional[datetime] = None,
) -> SessionAnalytics:
    """
    Reduce a session's peer records into per-user and per-session durations.

    Rules
    -----
    - Each peer record lasts ``left_at - joined_at`` minutes, rounded to 2
      decimals on its own. A peer without ``left_at`` is measured up to
      `now` (current UTC time unless given).
    - Records sharing a ``user_id`` are summed into one summary; the name of
      the last record seen wins.
    - Negative durations (inverted timestamps) are kept as-is.
    - ``session_duration`` is ``updated_at - created_at`` of the session
      record, independent of the peers.
    """
    if now is None:
        now = datetime.now(tz=timezone.utc)

    totals: Dict[str, Decimal] = {}
    names: Dict[str, Optional[str]] = {}

    for peer in session.peers.values():
        left_at = peer.left_at if peer.left_at is not None else now
        duration = round_half_up(minutes_between(peer.joined_at, left_at))

        totals[peer.user_id] = totals.get(peer.user_id, Decimal(0)) + duration
        names[peer.user_id] = peer.name

    user_duration_list = [
        UserDurationSummary(
            name=names[user_id],
            user_id=user_id,
            duration_minutes=float(total),
        )
        for user_id, total in totals.items()
    ]

    total_peer_duration = sum(totals.values(), Decimal(0))
    session_duration = minutes_between(session.created_at, session.updated_at)

    return SessionAnalytics(
        user_duration_list=user_duration_list,
        session_duration=format_minutes(session_duration),
        total_peer_duration=format_minutes(total_peer_duration),
    )
