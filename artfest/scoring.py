from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

import pandas as pd

from .errors import ValidationError
from .models import EventScore, Unit

TIE_BREAKS = ("stable", "name", "id")


@dataclass
class RankedUnit:
    rank: int
    unit: Unit
    total: int


# -----------------------
# Roster reconciliation
# -----------------------
def reconcile(unit: Unit, roster: Iterable[str], keep_orphans: bool = False) -> Unit:
    """
    Align a unit's score list with the event roster.

    One entry per roster event, in roster order. Existing scores are kept,
    missing events get score 0, repeated names collapse to their first entry.
    Entries for events no longer on the roster are dropped, or appended after
    the roster entries when keep_orphans is set. The input unit is not
    modified.
    """
    existing = {}
    for e in unit.events or []:
        existing.setdefault(e.name, e.score)

    events: List[EventScore] = []
    seen = set()
    for name in roster:
        if name in seen:
            continue
        seen.add(name)
        events.append(EventScore(name=name, score=existing.get(name, 0)))

    if keep_orphans:
        for name, score in existing.items():
            if name not in seen:
                seen.add(name)
                events.append(EventScore(name=name, score=score))

    return Unit(
        id=unit.id,
        name=unit.name,
        events=events,
        photo_access_count=unit.photo_access_count,
        credential_id=unit.credential_id,
        theme=unit.theme,
    )


def compute_total_score(unit: Unit) -> int:
    if not unit.events:
        return 0
    return sum(e.score for e in unit.events)


# -----------------------
# Ranking
# -----------------------
def rank(units: Iterable[Unit], tie_break: str = "stable") -> List[RankedUnit]:
    """
    Order units by total score, highest first, and number them 1..N.

    Equal totals still get distinct ranks. Their order is decided by
    tie_break: "stable" keeps fetch order, "name" sorts alphabetically
    (case-insensitive), "id" sorts by store key. Fetch order is the final
    tie-breaker in every mode.
    """
    if tie_break not in TIE_BREAKS:
        raise ValueError(f"tie_break must be one of {TIE_BREAKS}, got {tie_break!r}")

    units = list(units)
    if not units:
        return []

    table = pd.DataFrame(
        {
            "Pos": range(len(units)),
            "TotalScore": [compute_total_score(u) for u in units],
            "Name": [u.name.casefold() for u in units],
            "Id": [u.id for u in units],
        }
    )

    by, ascending = ["TotalScore"], [False]
    if tie_break == "name":
        by.append("Name")
        ascending.append(True)
    elif tie_break == "id":
        by.append("Id")
        ascending.append(True)
    by.append("Pos")
    ascending.append(True)

    table = table.sort_values(by=by, ascending=ascending, kind="mergesort").reset_index(drop=True)
    table.insert(0, "Rank", range(1, len(table) + 1))

    return [
        RankedUnit(rank=int(row["Rank"]), unit=units[int(row["Pos"])], total=int(row["TotalScore"]))
        for row in table.to_dict("records")
    ]


def parse_score(raw) -> int:
    """Parse a score typed into a form. Any integer is accepted."""
    text = str(raw if raw is not None else "").strip()
    if not text:
        raise ValidationError("Score is required.")
    try:
        return int(text)
    except ValueError:
        raise ValidationError(f"Score must be a whole number, got {text!r}.")
