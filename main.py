"""CLI entrypoint: crawl DBLP, analyze papers in batches, export CSV and report."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from concurrent.futures import ThreadPoolExecutor

from dotenv import load_dotenv

from csv_sink import write_csv
from dblp_feed import InvalidInputError, UpstreamError, crawl
from extraction import ProviderConfigError, analyze, resolve_provider
from models import Paper, PaperStatus
from report import generate_report

DEFAULT_SEARCH_URL = "https://dblp.org/search?q=infrared%20small%20target%20streamid%3Ajournals%2Ftgrs%3A"
BATCH_SIZE = int(os.getenv("BATCH_SIZE", "5"))


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(description="Crawl DBLP and extract technical metadata per paper")
    parser.add_argument("--url", default=DEFAULT_SEARCH_URL, help="DBLP search URL carrying a 'q' parameter")
    parser.add_argument("--start-year", type=int, default=2024, help="First publication year to keep (inclusive)")
    parser.add_argument("--end-year", type=int, default=2025, help="Last publication year to keep (inclusive)")
    parser.add_argument(
        "--max-batches",
        type=int,
        default=1,
        help=f"Number of analysis batches of BATCH_SIZE (currently {BATCH_SIZE}) papers to run; 0 crawls only",
    )
    parser.add_argument(
        "--provider",
        choices=["gemini", "perplexity", "openai", "anthropic"],
        default=None,
        help="Search-grounded model provider (defaults to EXTRACTION_PROVIDER or gemini)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only crawl and print what would be analyzed, without model calls or file writes",
    )
    return parser.parse_args(argv)


def select_next_batch(papers: list[Paper], batch_size: int = BATCH_SIZE) -> list[Paper]:
    """Return the first ``batch_size`` idle papers, in list order."""
    return [p for p in papers if p.status is PaperStatus.IDLE][:batch_size]


def analyze_batch(
    papers: list[Paper],
    provider: str | None = None,
    batch_size: int = BATCH_SIZE,
) -> list[Paper]:
    """Analyze the next batch of idle papers concurrently.

    Returns a new list in the same order where each analyzed paper is replaced
    by its result and every other record is left untouched.
    """
    # Positions rather than ids: DBLP hits are not de-duplicated.
    positions = [i for i, p in enumerate(papers) if p.status is PaperStatus.IDLE][:batch_size]
    updated = list(papers)
    if not positions:
        return updated

    batch = [papers[i].with_status(PaperStatus.ANALYZING) for i in positions]
    logging.info("Analyzing batch of %s papers", len(batch))
    with ThreadPoolExecutor(max_workers=len(batch)) as executor:
        results = list(executor.map(lambda paper: analyze(paper, provider=provider), batch))

    for index, result in zip(positions, results):
        updated[index] = result
    return updated


def run(
    search_url: str,
    start_year: int,
    end_year: int,
    max_batches: int,
    dry_run: bool,
    provider: str | None = None,
) -> list[Paper]:
    """Run one crawl followed by up to ``max_batches`` analysis batches."""
    if max_batches > 0 and not dry_run:
        resolve_provider(provider)

    papers = crawl(search_url, start_year, end_year)
    logging.info("Crawled %s papers from DBLP (%s-%s)", len(papers), start_year, end_year)

    if dry_run:
        for paper in select_next_batch(papers, BATCH_SIZE * max_batches):
            logging.info("[dry-run] Would analyze: %s", paper.title)
        return papers

    for batch_number in range(1, max_batches + 1):
        if not select_next_batch(papers, BATCH_SIZE):
            logging.info("No idle papers left after %s batch(es)", batch_number - 1)
            break
        papers = analyze_batch(papers, provider=provider, batch_size=BATCH_SIZE)

    done = sum(1 for p in papers if p.status is PaperStatus.DONE)
    failed = sum(1 for p in papers if p.status is PaperStatus.ERROR)
    logging.info("Run complete. total=%s done=%s failed=%s", len(papers), done, failed)

    write_csv(papers)
    generate_report(papers)
    return papers


def main(argv: list[str] | None = None) -> None:
    """Initialize config and execute the pipeline."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    try:
        run(
            search_url=args.url,
            start_year=args.start_year,
            end_year=args.end_year,
            max_batches=args.max_batches,
            dry_run=args.dry_run,
            provider=args.provider,
        )
    except ProviderConfigError as exc:
        logging.error("Extraction provider is not configured: %s", exc)
        sys.exit(1)
    except (InvalidInputError, UpstreamError) as exc:
        logging.error("Failed to crawl papers: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
