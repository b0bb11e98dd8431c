"""
CSV reader/writer for normalized job listings.

The column order follows the `JobListing` dataclass.  Files are
written in UTF‑8 and overwritten if they already exist.
"""

from __future__ import annotations

import csv
from dataclasses import asdict, fields
from typing import Iterable, List

from .schema import JobListing

FIELDNAMES: List[str] = [f.name for f in fields(JobListing)]


def write_jobs_csv(jobs: Iterable[JobListing], path: str) -> int:
    """Write listings to ``path`` and return the number of rows written."""
    count = 0
    with open(path, "w", newline="", encoding="utf-8") as csvfile:
        writer = csv.DictWriter(csvfile, fieldnames=FIELDNAMES)
        writer.writeheader()
        for job in jobs:
            writer.writerow(asdict(job))
            count += 1
    return count


def read_jobs_csv(path: str) -> List[JobListing]:
    jobs: List[JobListing] = []
    with open(path, "r", newline="", encoding="utf-8") as csvfile:
        for row in csv.DictReader(csvfile):
            jobs.append(JobListing(**{name: row.get(name) or "" for name in FIELDNAMES}))
    return jobs
