"""Event-time trust resolution for punch and break actions.

A client may report when an action happened (offline queues, slow networks).
The resolver decides which instant business logic uses and records how far
the client's clock is believed. It never raises; every anomaly is data.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional, Union

from ..core import constants
from ..core.enums import TimeSource, TrustLevel
from .datetime_utils import ensure_aware, round_half_up, to_iso_z

INVALID_CLIENT_TIMESTAMP = "INVALID_CLIENT_TIMESTAMP"
CLIENT_TIME_TOO_FAR_IN_FUTURE = "CLIENT_TIME_TOO_FAR_IN_FUTURE"
CLIENT_TIME_TOO_OLD = "CLIENT_TIME_TOO_OLD"

ClientTimestamp = Union[str, datetime, None]


@dataclass(frozen=True)
class EventTimeOptions:
    max_past_hours: float = constants.DEFAULT_MAX_CLIENT_PAST_HOURS
    max_future_minutes: float = constants.DEFAULT_MAX_CLIENT_FUTURE_MINUTES
    high_trust_skew_minutes: float = constants.DEFAULT_HIGH_TRUST_SKEW_MINUTES


@dataclass(frozen=True)
class EventTimeContext:
    server_received_at: datetime
    effective_at: datetime
    source: TimeSource
    trust_level: TrustLevel
    skew_minutes: Optional[int] = None
    anomaly: Optional[str] = None

    def clamp_not_before(self, reference: datetime, anomaly_code: str) -> "EventTimeContext":
        """Substitute ``reference`` when the effective instant precedes it.

        The clamp code is pipe-joined onto any anomaly already recorded.
        """
        reference = ensure_aware(reference)
        if self.effective_at >= reference:
            return self

        anomaly = f"{self.anomaly}|{anomaly_code}" if self.anomaly else anomaly_code
        return replace(self, effective_at=reference, anomaly=anomaly)

    def to_payload(self) -> dict:
        return {
            "serverReceivedAt": to_iso_z(self.server_received_at),
            "effectiveAt": to_iso_z(self.effective_at),
            "source": self.source.value,
            "trustLevel": self.trust_level.value,
            "skewMinutes": self.skew_minutes,
            "anomaly": self.anomaly,
        }


def parse_client_timestamp(value: Union[str, datetime]) -> Optional[datetime]:
    if isinstance(value, datetime):
        return ensure_aware(value)

    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return ensure_aware(datetime.fromisoformat(text))
    except ValueError:
        return None


def resolve_event_time(
    client_timestamp: ClientTimestamp,
    *,
    server_received_at: datetime,
    options: Optional[EventTimeOptions] = None,
) -> EventTimeContext:
    cfg = options or EventTimeOptions()
    server_received_at = ensure_aware(server_received_at)

    if not client_timestamp:
        return EventTimeContext(
            server_received_at=server_received_at,
            effective_at=server_received_at,
            source=TimeSource.SERVER,
            trust_level=TrustLevel.HIGH,
        )

    parsed = parse_client_timestamp(client_timestamp)
    if parsed is None:
        return EventTimeContext(
            server_received_at=server_received_at,
            effective_at=server_received_at,
            source=TimeSource.SERVER,
            trust_level=TrustLevel.LOW,
            anomaly=INVALID_CLIENT_TIMESTAMP,
        )

    # Positive skew: the client clock is behind the server.
    skew_minutes = round_half_up((server_received_at - parsed).total_seconds() / 60)

    if parsed > server_received_at + timedelta(minutes=cfg.max_future_minutes):
        return EventTimeContext(
            server_received_at=server_received_at,
            effective_at=server_received_at,
            source=TimeSource.SERVER,
            trust_level=TrustLevel.LOW,
            skew_minutes=skew_minutes,
            anomaly=CLIENT_TIME_TOO_FAR_IN_FUTURE,
        )

    # Old client times are still used, only flagged.
    if parsed < server_received_at - timedelta(hours=cfg.max_past_hours):
        return EventTimeContext(
            server_received_at=server_received_at,
            effective_at=parsed,
            source=TimeSource.CLIENT,
            trust_level=TrustLevel.LOW,
            skew_minutes=skew_minutes,
            anomaly=CLIENT_TIME_TOO_OLD,
        )

    trust = TrustLevel.HIGH if abs(skew_minutes) <= cfg.high_trust_skew_minutes else TrustLevel.MEDIUM
    return EventTimeContext(
        server_received_at=server_received_at,
        effective_at=parsed,
        source=TimeSource.CLIENT,
        trust_level=trust,
        skew_minutes=skew_minutes,
    )
