"""
Normalization subsystem for JobHub.

Scraped listings are represented as `JobListing` rows (see
`schema.py`) and persisted as CSV so later stages (matching, market
analysis, chat context) can load them without scraping again.
"""

from .schema import JobListing  # noqa: F401
from .write_csv import read_jobs_csv, write_jobs_csv  # noqa: F401
