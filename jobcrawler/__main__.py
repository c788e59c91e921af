"""CLI entry point: python -m jobcrawler --config config.yml [options]"""

from __future__ import annotations

import argparse
import itertools
import logging
import sys

from rich.console import Console
from rich.panel import Panel

from jobcrawler.config import LOG_FORMAT, LOG_LEVEL, CrawlConfig, load_config
from jobcrawler.errors import ConfigurationError
from jobcrawler.fetcher import PageFetcher
from jobcrawler.processor import SiteMapProcessor

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobcrawler",
        description=(
            "Crawl one or more sites page by page and print what the handler records.\n"
            "Pages are fetched only as results are consumed."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", default=None, metavar="FILE",
                        help="YAML file with base_urls, interval, max_urls, timeout")
    parser.add_argument("--url", action="append", default=None, metavar="URL",
                        help="Seed URL (repeatable); overrides base_urls from --config")
    parser.add_argument("--interval", type=float, default=None, metavar="SECONDS",
                        help="Pause between pages (default: 1)")
    parser.add_argument("--max-urls", type=int, default=None, metavar="N",
                        help="Last queue position to visit (default: 1000)")
    parser.add_argument("--timeout", type=float, default=None, metavar="SECONDS",
                        help="Per-request network timeout (default: 30)")
    parser.add_argument("--take", type=int, default=5, metavar="N",
                        help="Stop after N results (default: 5)")
    hosts = parser.add_mutually_exclusive_group()
    hosts.add_argument("--same-host", dest="same_host", action="store_true", default=True,
                       help="Only follow links on the seed hosts (default)")
    hosts.add_argument("--any-host", dest="same_host", action="store_false",
                       help="Follow links to other hosts")
    parser.add_argument("--log-level", default=LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: INFO)")
    return parser


def _resolve_config(args: argparse.Namespace) -> CrawlConfig:
    """Merge --config with command-line overrides."""
    values: dict = {}
    if args.config:
        values = load_config(args.config).model_dump()
    if args.url:
        values["base_urls"] = args.url
    for key in ("interval", "max_urls", "timeout"):
        value = getattr(args, key)
        if value is not None:
            values[key] = value
    if not values.get("base_urls"):
        raise ConfigurationError("no seed URL: pass --url or --config")
    try:
        return CrawlConfig(**values)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def _print_banner(console: Console, config: CrawlConfig, take: int) -> None:
    console.print(
        Panel.fit(
            f"[bold cyan]jobcrawler[/bold cyan]\n"
            f"Seeds:      [green]{', '.join(config.base_urls)}[/green]\n"
            f"Interval:   {config.interval}s\n"
            f"Max URLs:   {config.max_urls}\n"
            f"Timeout:    {config.timeout}s\n"
            f"Take:       {take}",
            border_style="cyan",
            title="[bold]Configuration[/bold]",
        ),
    )


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=LOG_FORMAT)

    try:
        config = _resolve_config(args)
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    console = Console()
    _print_banner(console, config, args.take)

    processor = SiteMapProcessor(
        config.base_urls,
        same_host=args.same_host,
        fetcher=PageFetcher(timeout=config.timeout, user_agent=config.user_agent),
        **config.spider_options(),
    )

    for i, result in enumerate(itertools.islice(processor.results(), max(args.take, 0))):
        console.print("%-2s: %s" % (i, result), markup=False, highlight=False)

    spider = processor.spider
    console.print(
        f"[bold]Pages processed:[/bold] {spider.processed}  "
        f"[bold]Records:[/bold] {len(spider.recorded)}  "
        f"[bold]Failures:[/bold] [red]{len(spider.failures)}[/red]",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
