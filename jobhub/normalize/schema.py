"""
Normalized job listing schema.

`JobListing` is the row type written to ``jobs.csv``.  The
``source_fingerprint`` is an md5 over the identifying fields so the
same posting scraped twice gets the same ``job_id``.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict


def listing_fingerprint(source: str, title: str, company: str, location: str) -> str:
    raw = "|".join([source, title, company, location])
    return hashlib.md5(raw.encode("utf-8")).hexdigest()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class JobListing:
    title: str
    company: str = ""
    location: str = ""
    url: str = ""
    source: str = ""
    keyword: str = ""
    scraped_at: str = field(default_factory=_now)
    source_fingerprint: str = ""
    job_id: str = ""

    def __post_init__(self) -> None:
        if not self.source_fingerprint:
            self.source_fingerprint = listing_fingerprint(self.source, self.title, self.company, self.location)
        if not self.job_id:
            self.job_id = self.source_fingerprint[:12]

    def as_job(self) -> Dict[str, object]:
        """Return the dict shape the AI prompts expect for a job."""
        return {
            "id": self.job_id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
        }
