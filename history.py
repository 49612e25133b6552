"""Mood history: date-window and trigger filtering plus trigger counts."""

import re
from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

from errors import InvalidInput

MIN_DAYS = 1
MAX_DAYS = 365

_INTEGER = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)


def parse_days(days: Union[str, int, None]) -> int:
    if days is None or (isinstance(days, str) and not days.strip()):
        raise InvalidInput("Missing email or days parameter")
    if isinstance(days, bool) or not isinstance(days, (str, int)):
        raise InvalidInput("Invalid days parameter. Must be between 1 and 365.")
    if isinstance(days, str) and not _INTEGER.fullmatch(days):
        raise InvalidInput("Invalid days parameter. Must be between 1 and 365.")
    n = int(days)
    if n < MIN_DAYS or n > MAX_DAYS:
        raise InvalidInput("Invalid days parameter. Must be between 1 and 365.")
    return n


def parse_triggers(raw: Optional[str]) -> List[str]:
    """Split a comma-separated filter, trimming items and dropping empties."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def count_triggers(entries: Iterable[Dict[str, Any]]) -> Dict[str, int]:
    """Number of entries carrying each trigger."""
    counts: Counter = Counter()
    for entry in entries:
        # one count per entry, however often it repeats a trigger
        counts.update(list(dict.fromkeys(entry.get("triggers") or [])))
    return dict(counts)


def mood_history(
    store,
    email: Optional[str],
    days: Union[str, int, None],
    triggers: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Entries of ``email`` from the last ``days`` days, newest first.

    ``triggers`` narrows the result to entries sharing at least one trigger
    with the filter. ``triggerCounts`` is computed over the returned entries
    only, so a filter also narrows the counts of co-occurring triggers.
    """
    if not email:
        raise InvalidInput("Missing email or days parameter")
    n = parse_days(days)
    wanted = parse_triggers(triggers)

    now = now or datetime.now(timezone.utc)
    rows = store.find(email, since=now - timedelta(days=n), until=now, triggers=wanted)

    entries = [
        {"mood": r["mood"], "triggers": list(r.get("triggers") or []), "created_at": r["created_at"]}
        for r in rows
    ]
    return {"moodHistory": entries, "triggerCounts": count_triggers(entries)}
