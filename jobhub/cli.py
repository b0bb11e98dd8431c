"""
Command line interface for JobHub.

Subcommands cover each feature: probing the configured LLM backend,
scraping job portals, parsing a résumé, matching a résumé against
scraped jobs, chatting with the assistant and summarising the job
market.  The CLI is intentionally thin and delegates to the `collect`,
`resume` and `ai` packages.
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import json
import logging
import sys
from typing import Dict, List, Optional

from .ai.assistant import CareerAssistant
from .ai.errors import AssistantError, GatewayError
from .ai.gateway import AIGateway, gateway_from_settings
from .ai.prompts import ChatContext
from .collect.browser import BrowserConfig, BrowserSession
from .collect.portals import EXAMPLE_PORTAL, portals_from_config
from .collect.runner import collect
from .config import Settings, load_settings, load_yaml_config
from .normalize.write_csv import read_jobs_csv, write_jobs_csv
from .resume.parse_resume import load_resume_json, parse_resume_file, save_resume_json

logger = logging.getLogger("jobhub.cli")


def build_gateway(settings: Settings) -> AIGateway:
    return gateway_from_settings(settings)


def _load_jobs(path: Optional[str]) -> List[Dict[str, object]]:
    if not path:
        return []
    return [job.as_job() for job in read_jobs_csv(path)]


async def cmd_models(args: argparse.Namespace, settings: Settings) -> int:
    """Probe the configured backend and print the selected model."""
    gateway = build_gateway(settings)
    await gateway.ensure_ready()
    if not gateway.ready:
        logger.error("No model available for backend %s", gateway.backend.name)
        return 1
    print(f"{gateway.backend.name}: {gateway.active_model_name}")
    return 0


async def cmd_scrape(args: argparse.Namespace, settings: Settings) -> int:
    """Scrape configured portals for the given keywords and write CSV."""
    portals = portals_from_config(load_yaml_config(args.config)) if args.config else []
    if not portals:
        logger.warning("No portals configured; using the example portal")
        portals = [EXAMPLE_PORTAL]
    config = BrowserConfig(headless=settings.headless and not args.headed, retries=settings.scrape_retries)
    async with BrowserSession(config) as session:
        listings = await collect(session, portals, args.keyword, retries=args.retries, log_dir=args.log_dir)
    count = write_jobs_csv(listings, args.out)
    logger.info("Wrote %d listings to %s", count, args.out)
    return 0


async def cmd_resume_parse(args: argparse.Namespace, settings: Settings) -> int:
    assistant = CareerAssistant(build_gateway(settings))
    profile = await parse_resume_file(args.file, assistant)
    save_resume_json(profile, args.out)
    return 0


async def cmd_match(args: argparse.Namespace, settings: Settings) -> int:
    """Match a parsed résumé against scraped jobs and write matches CSV."""
    profile = load_resume_json(args.resume)
    jobs = _load_jobs(args.jobs)
    titles = {str(job["id"]): job for job in jobs}
    assistant = CareerAssistant(build_gateway(settings))
    matches = await assistant.recommend_jobs(profile, jobs)
    if not matches:
        logger.warning("No job recommendations returned")
    with open(args.out, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["job_id", "company", "title", "match_score", "reasons"])
        writer.writeheader()
        for match in matches:
            job = titles.get(match.job_id, {})
            writer.writerow(
                {
                    "job_id": match.job_id,
                    "company": job.get("company", ""),
                    "title": job.get("title", ""),
                    "match_score": f"{match.match_score:.4f}",
                    "reasons": "; ".join(match.reasons),
                }
            )
    logger.info("Wrote %d matches to %s", len(matches), args.out)
    return 0


async def cmd_chat(args: argparse.Namespace, settings: Settings) -> int:
    resume = load_resume_json(args.resume).model_dump(by_alias=True) if args.resume else None
    context = ChatContext(resume_data=resume, available_jobs=_load_jobs(args.jobs))
    assistant = CareerAssistant(build_gateway(settings))
    if args.stream:
        async for chunk in await assistant.chat_stream(args.message, context):
            sys.stdout.write(chunk)
            sys.stdout.flush()
        sys.stdout.write("\n")
    else:
        print(await assistant.chat(args.message, context))
    return 0


async def cmd_market(args: argparse.Namespace, settings: Settings) -> int:
    assistant = CareerAssistant(build_gateway(settings))
    analysis = await assistant.analyze_market(_load_jobs(args.jobs))
    if analysis is None:
        logger.error("Market analysis failed")
        return 1
    print(json.dumps(analysis.model_dump(by_alias=True), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jobhub", description="JobHub CLI")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    models_cmd = subparsers.add_parser("models", help="Probe the LLM backend and show the selected model")
    models_cmd.set_defaults(func=cmd_models)

    scrape_cmd = subparsers.add_parser("scrape", help="Scrape job portals")
    scrape_cmd.add_argument("--config", default="config.yaml", help="YAML file with portal definitions")
    scrape_cmd.add_argument("--keyword", action="append", required=True, help="Search keyword (repeatable)")
    scrape_cmd.add_argument("--retries", type=int, default=None, help="Retries per page (default from settings)")
    scrape_cmd.add_argument("--out", default="jobs.csv", help="Output CSV path")
    scrape_cmd.add_argument("--log-dir", dest="log_dir", default=None, help="Directory for collect.log")
    scrape_cmd.add_argument("--headed", action="store_true", help="Show the browser window")
    scrape_cmd.set_defaults(func=cmd_scrape)

    resume_parser = subparsers.add_parser("resume", help="Résumé related commands")
    resume_sub = resume_parser.add_subparsers(dest="subcommand", required=True)
    parse_resume_cmd = resume_sub.add_parser("parse", help="Parse a résumé file")
    parse_resume_cmd.add_argument("--file", required=True, help="Path to résumé file (txt, pdf, docx)")
    parse_resume_cmd.add_argument("--out", required=True, help="Path to output JSON file")
    parse_resume_cmd.set_defaults(func=cmd_resume_parse)

    match_cmd = subparsers.add_parser("match", help="Match résumé to jobs")
    match_cmd.add_argument("--resume", required=True, help="Path to résumé JSON")
    match_cmd.add_argument("--jobs", required=True, help="Path to jobs CSV")
    match_cmd.add_argument("--out", default="matches.csv", help="Output CSV path")
    match_cmd.set_defaults(func=cmd_match)

    chat_cmd = subparsers.add_parser("chat", help="Ask the assistant a question")
    chat_cmd.add_argument("message", help="Question to ask")
    chat_cmd.add_argument("--resume", help="Path to résumé JSON for context")
    chat_cmd.add_argument("--jobs", help="Path to jobs CSV for context")
    chat_cmd.add_argument("--stream", action="store_true", help="Stream the answer as it is generated")
    chat_cmd.set_defaults(func=cmd_chat)

    market_cmd = subparsers.add_parser("market", help="Summarise skills, salaries and locations")
    market_cmd.add_argument("--jobs", required=True, help="Path to jobs CSV")
    market_cmd.set_defaults(func=cmd_market)

    return parser


def main(argv: List[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings()
    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")
    try:
        return asyncio.run(args.func(args, settings))
    except (AssistantError, GatewayError, OSError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
