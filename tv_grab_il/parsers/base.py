from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

HHMM_RX = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")
# listings ending at midnight may say "24:00"
END_HHMM_RX = re.compile(r"^(([01]\d|2[0-3]):[0-5]\d|24:00)$")


class ShowPayloadError(ValueError):
    """Raised when an embedded show payload cannot be turned into a ShowRecord."""


@dataclass(frozen=True)
class Channel:
    id: str
    name: str
    url: str
    icon: Optional[str] = None


@dataclass(frozen=True)
class ShowRecord:
    name: str
    start_time: str  # "HH:MM", site local
    end_time: str    # "HH:MM", site local
    duration: int    # minutes
    description: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Any) -> Optional["ShowRecord"]:
        """Validate a decoded payload. Returns None when it carries no show name."""
        if not isinstance(payload, dict):
            raise ShowPayloadError(f"payload is not an object: {type(payload).__name__}")

        name = payload.get("name")
        if name is None or (isinstance(name, str) and not name.strip()):
            return None
        if not isinstance(name, str):
            raise ShowPayloadError(f"name is not a string: {name!r}")

        desc = payload.get("description")
        if desc is not None and not isinstance(desc, str):
            raise ShowPayloadError(f"description is not a string: {desc!r}")

        return cls(
            name=name.strip(),
            start_time=_hhmm(payload, "start_time"),
            end_time=_hhmm(payload, "end_time", END_HHMM_RX),
            duration=_minutes(payload.get("duration")),
            description=(desc or "").strip() or None,
        )


@dataclass(frozen=True)
class Programme:
    channel: str
    start: str            # "YYYYMMDDHHMMSS +ZZZZ"
    title: str
    stop: Optional[str] = None
    description: Optional[str] = None


def _hhmm(payload: Dict[str, Any], key: str, rx=HHMM_RX) -> str:
    raw = payload.get(key)
    if not isinstance(raw, str) or not rx.match(raw.strip()):
        raise ShowPayloadError(f"{key} is not HH:MM: {raw!r}")
    return raw.strip()


def _minutes(raw: Any) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(raw, bool):
        raise ShowPayloadError(f"duration is not a number of minutes: {raw!r}")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise ShowPayloadError(f"duration is not a number of minutes: {raw!r}")
    if value < 0:
        raise ShowPayloadError(f"duration is negative: {value}")
    return value


class Parser:
    """Interface for a site-specific parser."""
    domains: list[str] = []

    def fetch_channels(self, fetcher) -> Dict[str, Channel]:
        raise NotImplementedError

    def fetch_schedule(self, fetcher, channel_id: str):
        raise NotImplementedError
