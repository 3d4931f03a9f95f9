"""Record types for the festival database.

Persisted field names (photoAccessCount, credentialId, ...) match
the festival's Realtime Database export so existing data loads as-is.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0


@dataclass
class Event:
    id: str
    name: str

    @classmethod
    def from_record(cls, event_id: str, record: Optional[Dict[str, Any]]) -> "Event":
        record = record or {}
        return cls(id=event_id, name=str(record.get("name") or ""))

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name}


@dataclass
class EventScore:
    name: str
    score: int = 0

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EventScore":
        return cls(name=str(record.get("name") or ""), score=_as_int(record.get("score", 0)))

    def to_record(self) -> Dict[str, Any]:
        return {"name": self.name, "score": self.score}


@dataclass
class Unit:
    """One competing group (a "megala")."""
    id: str
    name: str
    events: List[EventScore] = field(default_factory=list)
    photo_access_count: int = 0
    credential_id: str = ""
    theme: str = ""

    @classmethod
    def from_record(cls, unit_id: str, record: Optional[Dict[str, Any]]) -> "Unit":
        record = record or {}
        raw_events = record.get("events") or []
        # Realtime Database hands back arrays with holes as dicts keyed "0", "1", ...
        if isinstance(raw_events, dict):
            raw_events = [raw_events[k] for k in sorted(raw_events, key=lambda k: _as_int(k))]
        return cls(
            id=unit_id,
            name=str(record.get("name") or ""),
            events=[EventScore.from_record(e) for e in raw_events if isinstance(e, dict)],
            photo_access_count=_as_int(record.get("photoAccessCount", 0)),
            credential_id=str(record.get("credentialId") or ""),
            theme=str(record.get("theme") or ""),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "theme": self.theme,
            "events": [e.to_record() for e in self.events],
            "photoAccessCount": self.photo_access_count,
            "credentialId": self.credential_id,
        }

    def score_for(self, event_name: str) -> int:
        for e in self.events:
            if e.name == event_name:
                return e.score
        return 0


@dataclass
class GalleryImage:
    id: str
    src: str
    alt: str = ""
    unit_id: Optional[str] = None
    ai_hint: str = ""
    storage_path: str = ""

    @classmethod
    def from_record(cls, image_id: str, record: Optional[Dict[str, Any]]) -> "GalleryImage":
        record = record or {}
        return cls(
            id=image_id,
            src=str(record.get("src") or ""),
            alt=str(record.get("alt") or ""),
            unit_id=record.get("unitId") or None,
            ai_hint=str(record.get("aiHint") or ""),
            storage_path=str(record.get("storagePath") or ""),
        )

    def to_record(self) -> Dict[str, Any]:
        rec = {"src": self.src, "alt": self.alt, "aiHint": self.ai_hint, "storagePath": self.storage_path}
        if self.unit_id:
            rec["unitId"] = self.unit_id
        return rec


@dataclass
class VenueDetails:
    """Where an item is happening (room announcement)."""
    id: str
    room_number: str
    item: str

    @classmethod
    def from_record(cls, venue_id: str, record: Optional[Dict[str, Any]]) -> "VenueDetails":
        record = record or {}
        return cls(
            id=venue_id,
            room_number=str(record.get("roomNumber") or ""),
            item=str(record.get("item") or ""),
        )

    def to_record(self) -> Dict[str, Any]:
        return {"roomNumber": self.room_number, "item": self.item}
