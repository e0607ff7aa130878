"""Command-line interface for the site graph crawler."""

import json
import sys
from dataclasses import replace

from sitegraph.analytics import summarize
from sitegraph.config import CrawlerConfig, settings
from sitegraph.constants import (
    CRAWL_ALGORITHMS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_PAGES_TO_CRAWL,
    SEARCH_ALGORITHMS,
)
from sitegraph.exceptions import InvalidRequest
from sitegraph.logging_config import setup_logging
from sitegraph.search import SearchEngine
from sitegraph.site_crawler import SiteGraphCrawler


def print_progress(snapshot):
    """Print one line per progress snapshot."""
    stats = snapshot.stats
    print(
        f"  ⏳ {stats.total_pages} pages, {stats.total_links} links, "
        f"depth {stats.depth}, {stats.crawl_time_seconds}s"
    )


def print_crawl_stats(result):
    """Print crawl statistics in a formatted way.

    Args:
        result: Final CrawlResult
    """
    stats = result.stats
    print(f"\n{'=' * 60}")
    print(f"Site Graph ({stats.algorithm.upper()})")
    print(f"{'=' * 60}")
    print(f"\n📊 Pages: {stats.total_pages}")
    print(f"  • Links: {stats.total_links}")
    print(f"  • Max depth reached: {stats.depth}")
    print(f"  • Duplicates removed: {stats.duplicates_removed}")
    print(f"  • Avg links per page: {stats.average_links_per_page:.2f}")
    print(f"  • Crawl time: {stats.crawl_time_seconds}s")


def print_summary(summary):
    """Print site analytics.

    Args:
        summary: SiteSummary for the crawl
    """
    if summary.top_pages:
        print(f"\n🏆 Top pages by rank:")
        for page, rank in summary.top_pages:
            print(f"  • {rank:.4f}  {page.url}")

    print(f"\n📐 Pages per depth:")
    for depth, count in summary.depth_distribution.items():
        print(f"  • D{depth}: {count}")

    if summary.top_keywords:
        print(f"\n🔑 Top keywords:")
        for keyword, count in summary.top_keywords:
            print(f"  • {keyword} ({count} pages)")

    if summary.most_connected:
        print(f"\n🔗 Most linked-to pages:")
        for page in summary.most_connected:
            print(f"  • {page.incoming_link_count} in  {page.url}")

    acyclic = "yes" if summary.is_acyclic else "no"
    print(f"\n🧩 Strongly connected components: {len(summary.components)} (acyclic: {acyclic})")


def print_search_results(query, results):
    """Print search hits for a query."""
    print(f"\n🔍 Search: {query!r} ({len(results)} results)")
    for result in results:
        fields = ", ".join(result.matched_fields) or "-"
        print(f"  • {result.score:.1f}  {result.node.url}  [{fields}]")


def crawl_command(args):
    """Crawl a site, summarize its graph and optionally search it."""
    config = CrawlerConfig.from_env()
    overrides = {"record_cross_links": args.cross_links or config.record_cross_links}
    if args.concurrency is not None:
        overrides["max_concurrent"] = args.concurrency
    if args.timeout is not None:
        overrides["timeout"] = args.timeout

    try:
        config = replace(config, **overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    crawler = SiteGraphCrawler(config=config)
    on_snapshot = print_progress if args.output == "text" else None

    try:
        result = crawler.crawl_site(
            args.url,
            max_depth=args.max_depth,
            max_pages=args.max_pages,
            algorithm=args.algorithm,
            on_snapshot=on_snapshot,
        )
    except InvalidRequest as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    summary = summarize(result)
    hits = None
    if args.query:
        hits = SearchEngine().search(
            result.nodes,
            args.query,
            algorithm=args.search_mode,
            min_score=args.min_score,
        )

    if args.output == "json":
        output = {
            "crawl": result.to_dict(),
            "summary": summary.to_dict(),
        }
        if hits is not None:
            output["search"] = [hit.to_dict() for hit in hits]
        print(json.dumps(output, indent=2))
        return

    print_crawl_stats(result)
    print_summary(summary)
    if hits is not None:
        print_search_results(args.query, hits)
    print(f"\n{'=' * 60}\n")


def main(argv=None):
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Site Graph - Crawl a website into a link graph and analyze it"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    crawl_parser = subparsers.add_parser(
        "crawl", help="Crawl a site and report its link graph."
    )
    crawl_parser.add_argument("url", help="Seed URL to start crawling from")
    crawl_parser.add_argument(
        "--max-depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Deepest level added to the graph, 1-50 (default: {DEFAULT_MAX_DEPTH})",
    )
    crawl_parser.add_argument(
        "--max-pages",
        type=int,
        default=DEFAULT_MAX_PAGES_TO_CRAWL,
        help=f"Maximum pages added to the graph, 5-1000 (default: {DEFAULT_MAX_PAGES_TO_CRAWL})",
    )
    crawl_parser.add_argument(
        "--algorithm",
        choices=CRAWL_ALGORITHMS,
        default="bfs",
        help="Traversal order (default: bfs)",
    )
    crawl_parser.add_argument(
        "--concurrency",
        type=int,
        help="Maximum concurrent fetches (default: 1)",
    )
    crawl_parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds (default: 30)",
    )
    crawl_parser.add_argument(
        "--cross-links",
        action="store_true",
        help="Also record links to pages that were already discovered",
    )
    crawl_parser.add_argument(
        "--query",
        "-q",
        help="Search the crawled pages for this query",
    )
    crawl_parser.add_argument(
        "--search-mode",
        choices=SEARCH_ALGORITHMS,
        default="fuzzy",
        help="Search matching strategy (default: fuzzy)",
    )
    crawl_parser.add_argument(
        "--min-score",
        type=float,
        default=0,
        help="Drop search results scoring below this (default: 0)",
    )
    crawl_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    crawl_parser.set_defaults(func=crawl_command)

    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
