"""
JobHub: job portal tooling.

This package contains the subsystems behind the JobHub job portal:
scraping job listings with a shared headless browser, parsing résumés
and matching them to jobs with a hosted LLM, and a career chat
assistant.

The high‑level flow is:

1. **collect** – Launch one headless browser, open a fresh page per
   portal search and retry failed pages a bounded number of times.
   Listings are extracted with CSS selectors.
2. **normalize** – Represent listings as `JobListing` rows and persist
   them as CSV.
3. **resume** – Extract text from a résumé file and parse it into a
   validated profile.
4. **ai** – Select a working model by probing candidates in order,
   serve generations through a short-lived response cache and build
   the prompts for matching, chat and market analysis.
5. **cli** – Command line entry point wiring together the above
   components.
"""

__version__ = "0.1.0"
