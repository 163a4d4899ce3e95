"""Persist scraped event records to ``output/events.json``."""

import json
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from eventleads.models import EventRecord

DEFAULT_OUTPUT_DIR = Path("output")
RESULTS_STEM = "events"


def archive_timestamp(now: datetime) -> str:
    """Filename-safe, sortable UTC timestamp, e.g. ``2026-10-18T23-02-05``."""
    iso = now.astimezone(timezone.utc).isoformat()
    return re.sub(r"[:.]", "-", iso)[:19]


class ResultStore:
    """
    Owns the canonical results file and its archived predecessors.

    ``persist`` rewrites the whole file on every call, so the file always
    holds a complete JSON array of the records collected so far.
    """

    def __init__(self, output_dir: Path | str = DEFAULT_OUTPUT_DIR):
        self.output_dir = Path(output_dir)
        self.path = self.output_dir / f"{RESULTS_STEM}.json"

    def archive_previous(self, now: Optional[datetime] = None) -> Optional[Path]:
        """Rename an existing results file to ``events-<timestamp>.json``."""
        if not self.path.exists():
            return None

        if now is None:
            now = datetime.now(timezone.utc)
        stem = f"{RESULTS_STEM}-{archive_timestamp(now)}"
        archive_path = self.output_dir / f"{stem}.json"
        n = 1
        # Runs archived within the same second get a numeric suffix
        while archive_path.exists():
            archive_path = self.output_dir / f"{stem}-{n}.json"
            n += 1
        self.path.rename(archive_path)
        print(f"📦 Archived previous results to {archive_path}")
        return archive_path

    def persist(self, records: Sequence[EventRecord]) -> None:
        """Overwrite the results file with *records* as an indented JSON array."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        content = json.dumps(
            [r.model_dump() for r in records], indent=2, ensure_ascii=False
        )
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(content, encoding="utf-8")
        tmp_path.replace(self.path)
