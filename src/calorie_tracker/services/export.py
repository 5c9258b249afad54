"""Tabular export and re-import of log entries."""

import io
from collections.abc import Iterable
from datetime import datetime
from zoneinfo import ZoneInfo

import pandas as pd

from calorie_tracker.domain.entries import EntryType, LogEntry

COLUMNS = [
    "date",
    "time",
    "type",
    "name",
    "cals",
    "protein",
    "fiber",
    "sugar",
    "fat",
    "timestamp",
    "id",
]
MACRO_COLUMNS = ["protein", "fiber", "sugar", "fat"]
_TEXT_COLUMNS = ["date", "time", "type", "name", "timestamp", "id"]


def entries_to_frame(entries: Iterable[LogEntry], tz: ZoneInfo) -> pd.DataFrame:
    """Flatten entries into a frame; calories are whole, macros one decimal."""
    rows = []
    for entry in entries:
        local = entry.timestamp.astimezone(tz)
        rows.append(
            {
                "date": local.date().isoformat(),
                "time": local.strftime("%H:%M"),
                "type": entry.type.value,
                "name": entry.name,
                "cals": int(round(entry.cals)),
                "protein": round(entry.protein, 1),
                "fiber": round(entry.fiber, 1),
                "sugar": round(entry.sugar, 1),
                "fat": round(entry.fat, 1),
                "timestamp": entry.timestamp.isoformat(),
                "id": entry.id,
            }
        )
    return pd.DataFrame(rows, columns=COLUMNS)


def export_entries_csv(entries: Iterable[LogEntry], tz: ZoneInfo) -> str:
    """Render entries as CSV text."""
    return entries_to_frame(entries, tz).to_csv(index=False)


def parse_entries_csv(text: str) -> list[LogEntry]:
    """Read entries back from exported CSV text."""
    frame = pd.read_csv(
        io.StringIO(text),
        dtype={column: str for column in _TEXT_COLUMNS},
        keep_default_na=False,
    )
    entries = []
    for row in frame.to_dict(orient="records"):
        entries.append(
            LogEntry(
                id=row["id"],
                type=EntryType(row["type"]),
                name=row["name"],
                timestamp=datetime.fromisoformat(row["timestamp"]),
                cals=float(row["cals"]),
                **{column: float(row[column]) for column in MACRO_COLUMNS},
            )
        )
    return entries
