"""
Festival data services.

Every function takes the record store as its first argument; nothing here
holds a database handle of its own.

Collections:
- events        roster of scoring categories {name}
- units         competing groups {name, theme, events: [{name, score}], photoAccessCount, credentialId}
- galleryImages photo records {src, alt, unitId?, aiHint, storagePath}
- venue         room announcements {roomNumber, item}
"""
from __future__ import annotations

import logging
import secrets
from typing import List, Optional

from .errors import NotFoundError, ValidationError
from .models import Event, GalleryImage, Unit, VenueDetails
from .scoring import RankedUnit, rank, reconcile
from .store import RecordStore, StoreError

logger = logging.getLogger(__name__)

EVENTS = "events"
UNITS = "units"
GALLERY = "galleryImages"
VENUE = "venue"


def _required(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"{label} cannot be empty.")
    return value


# -----------------------
# Events (roster)
# -----------------------
def get_events(store: RecordStore) -> List[Event]:
    return [Event.from_record(k, v) for k, v in store.get_all(EVENTS).items()]


def _roster(store: RecordStore) -> List[str]:
    return [e.name for e in get_events(store)]


def _fan_out(store: RecordStore, transform, action: str) -> None:
    """Apply transform to every unit record, one transaction per unit."""
    failed = []
    for unit_id in store.get_all(UNITS):
        try:
            store.transact(UNITS, unit_id, transform)
        except StoreError:
            logger.exception("%s: update of unit %s failed", action, unit_id)
            failed.append(unit_id)
    if failed:
        raise StoreError(f"{action}: {len(failed)} unit(s) were not updated: {', '.join(failed)}")


def add_event(store: RecordStore, name: str) -> str:
    """
    Add an event to the roster and give every unit a zero score for it.

    The roster insert lands first. If updating some unit fails afterwards the
    error is raised, and that unit picks up the event at score 0 the next
    time it is read through reconcile().
    """
    name = _required(name, "Event name")
    event_id = store.push(EVENTS, Event(id="", name=name).to_record())
    logger.info("added event %s (%s)", name, event_id)

    def add_entry(record):
        if record is None:
            return None
        events = list(record.get("events") or [])
        if any(e.get("name") == name for e in events):
            return None
        events.append({"name": name, "score": 0})
        record["events"] = events
        return record

    _fan_out(store, add_entry, f"add event {name!r}")
    return event_id


def delete_event(store: RecordStore, event_id: str, name: str) -> None:
    """Remove an event from the roster and drop its score from every unit."""
    store.remove(EVENTS, event_id)
    logger.info("deleted event %s (%s)", name, event_id)

    def drop_entry(record):
        if record is None:
            return None
        events = list(record.get("events") or [])
        kept = [e for e in events if e.get("name") != name]
        if len(kept) == len(events):
            return None
        record["events"] = kept
        return record

    _fan_out(store, drop_entry, f"delete event {name!r}")


# -----------------------
# Units
# -----------------------
def get_units(store: RecordStore, keep_orphans: bool = False) -> List[Unit]:
    roster = _roster(store)
    return [
        reconcile(Unit.from_record(k, v), roster, keep_orphans=keep_orphans)
        for k, v in store.get_all(UNITS).items()
    ]


def get_unit(store: RecordStore, unit_id: str, keep_orphans: bool = False) -> Optional[Unit]:
    record = store.get_one(UNITS, unit_id)
    if record is None:
        return None
    return reconcile(Unit.from_record(unit_id, record), _roster(store), keep_orphans=keep_orphans)


def get_unit_by_credential(store: RecordStore, credential_id: str, keep_orphans: bool = False) -> Optional[Unit]:
    credential_id = (credential_id or "").strip()
    if not credential_id:
        return None
    for unit_id, record in store.get_all(UNITS).items():
        if (record or {}).get("credentialId") == credential_id:
            return reconcile(Unit.from_record(unit_id, record), _roster(store), keep_orphans=keep_orphans)
    return None


def new_credential() -> str:
    return secrets.token_urlsafe(6).replace("-", "").replace("_", "")[:8].upper()


def add_unit(store: RecordStore, name: str, theme: str = "", credential_id: Optional[str] = None) -> str:
    name = _required(name, "Unit name")
    taken = {(r or {}).get("credentialId") for r in store.get_all(UNITS).values()}

    if credential_id is not None and credential_id.strip():
        credential_id = credential_id.strip()
        if credential_id in taken:
            raise ValidationError("That credential ID is already assigned to another unit.")
    else:
        credential_id = new_credential()
        while credential_id in taken:
            credential_id = new_credential()

    unit = reconcile(Unit(id="", name=name, theme=(theme or "").strip(), credential_id=credential_id), _roster(store))
    unit_id = store.push(UNITS, unit.to_record())
    logger.info("added unit %s (%s)", name, unit_id)
    return unit_id


def delete_unit(store: RecordStore, unit_id: str) -> None:
    store.remove(UNITS, unit_id)
    logger.info("deleted unit %s", unit_id)


def update_score(store: RecordStore, unit_id: str, event_name: str, new_score: int) -> None:
    """
    Set one event score on a unit.

    The whole unit record is rewritten inside a transaction, so a concurrent
    update to a different event on the same unit is re-read and kept.
    """
    event_name = _required(event_name, "Event name")
    if isinstance(new_score, bool) or not isinstance(new_score, int):
        raise ValidationError(f"Score must be a whole number, got {new_score!r}.")

    def set_score(record):
        if record is None:
            return None
        events = list(record.get("events") or [])
        for e in events:
            if e.get("name") == event_name:
                e["score"] = new_score
                break
        else:
            events.append({"name": event_name, "score": new_score})
        record["events"] = events
        return record

    if store.transact(UNITS, unit_id, set_score) is None:
        raise NotFoundError(f"Unit {unit_id} not found.")
    logger.info("unit %s: %s = %d", unit_id, event_name, new_score)


def increment_photo_access_count(store: RecordStore, unit_id: str) -> None:
    """Bump the unit's gallery view counter. Failures are logged, never raised."""

    def bump(record):
        if record is None:
            return None
        record["photoAccessCount"] = int(record.get("photoAccessCount") or 0) + 1
        return record

    try:
        store.transact(UNITS, unit_id, bump)
    except StoreError:
        logger.warning("could not increment photo access count for unit %s", unit_id, exc_info=True)


def get_scoreboard(
    store: RecordStore,
    search: str = "",
    tie_break: str = "stable",
    keep_orphans: bool = False,
) -> List[RankedUnit]:
    """Ranked units, optionally filtered by name. Ranks are overall positions."""
    ranked = rank(get_units(store, keep_orphans=keep_orphans), tie_break=tie_break)
    term = (search or "").strip().casefold()
    if not term:
        return ranked
    return [r for r in ranked if term in r.unit.name.casefold()]


# -----------------------
# Gallery records
# -----------------------
def get_gallery_images(store: RecordStore, unit_id: Optional[str] = None) -> List[GalleryImage]:
    images = [GalleryImage.from_record(k, v) for k, v in store.get_all(GALLERY).items()]
    if unit_id is not None:
        images = [img for img in images if img.unit_id == unit_id]
    return images


def add_gallery_image(
    store: RecordStore,
    src: str,
    alt: str = "",
    unit_id: Optional[str] = None,
    ai_hint: str = "",
    storage_path: str = "",
) -> str:
    src = _required(src, "Image source")
    unit_id = (unit_id or "").strip() or None
    if unit_id is not None and store.get_one(UNITS, unit_id) is None:
        raise NotFoundError(f"Unit {unit_id} not found.")
    image = GalleryImage(
        id="",
        src=src,
        alt=(alt or "").strip(),
        unit_id=unit_id,
        ai_hint=(ai_hint or "").strip(),
        storage_path=(storage_path or "").strip(),
    )
    return store.push(GALLERY, image.to_record())


def delete_gallery_image(store: RecordStore, image_id: str) -> None:
    store.remove(GALLERY, image_id)


# -----------------------
# Venue announcements
# -----------------------
def get_venue_details(store: RecordStore) -> List[VenueDetails]:
    return [VenueDetails.from_record(k, v) for k, v in store.get_all(VENUE).items()]


def _venue(room_number: str, item: str) -> VenueDetails:
    if not (room_number or "").strip() or not (item or "").strip():
        raise ValidationError("Venue details must include a room number and an item.")
    return VenueDetails(id="", room_number=room_number.strip(), item=item.strip())


def add_venue_details(store: RecordStore, room_number: str, item: str) -> str:
    return store.push(VENUE, _venue(room_number, item).to_record())


def update_venue_details(store: RecordStore, venue_id: str, room_number: str, item: str) -> None:
    details = _venue(room_number, item)
    if store.get_one(VENUE, venue_id) is None:
        raise NotFoundError(f"Venue entry {venue_id} not found.")
    store.set(VENUE, venue_id, details.to_record())


def delete_venue_details(store: RecordStore, venue_id: str) -> None:
    store.remove(VENUE, venue_id)
