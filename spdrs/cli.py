# === FILE: spdrs/cli.py ===
#!/usr/bin/env python3
"""
Command-line entry point for the spdrs crawler.

Usage:
  spdrs [OPTIONS] URL

Crawls every page reachable from URL on the same host (and port) and prints
each page followed by the in-scope links found on it.

Options:
  --config PATH       YAML/JSON config file (CLI flags override its values)
  --workers INT       Number of concurrent fetch workers
  --timeout SEC       Per-request timeout (none by default)
  --user-agent TEXT   User-Agent header
  --json PATH         Also save the crawl report as JSON
  --pretty            Indent the JSON report
  --log-level LEVEL   Logging level (DEBUG, INFO, ...)
  --log-file PATH     Also write logs to this file
  --log-format FORMAT Format string for log records
  --version, -v       Show the spdrs version

Example:
  spdrs --workers 8 --log-level DEBUG http://localhost:8000/
"""
import asyncio
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from spdrs import __version__
from spdrs.config import load_config
from spdrs.engine import start_crawl
from spdrs.logger import configure
from spdrs.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
USAGE = "Usage: spdrs <url>"


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(err["msg"].removeprefix("Value error, ") for err in exc.errors())


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='spdrs, version %(version)s')
@click.argument('urls', nargs=-1)
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='YAML/JSON config file.'
)
@click.option('--workers', '-w', type=int, default=None, help='Number of concurrent fetch workers.')
@click.option('--timeout', type=float, default=None, help='Per-request timeout in seconds.')
@click.option('--user-agent', 'user_agent', default=None, help='User-Agent header.')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also save the crawl report as JSON.'
)
@click.option('--pretty', is_flag=True, help='Indent the JSON report by 2 spaces.')
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Logging level.'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Also write logs to this file.'
)
@click.option(
    '--log-format', 'log_format',
    default='%(asctime)s %(levelname)s %(name)s %(message)s',
    show_default=True,
    help='Format string for log records.'
)
def cli(urls, config_path, workers, timeout, user_agent, json_output, pretty,
        log_level, log_file, log_format):
    """Crawl URL and every same-origin page reachable from it."""
    if len(urls) != 1:
        print_error(USAGE)

    configure(
        level=log_level,
        log_file=log_file,
        log_format=log_format,
    )
    try:
        cfg = load_config(
            config_path,
            seed_url=urls[0],
            workers=workers,
            timeout=timeout,
            user_agent=user_agent,
        )
    except ValidationError as e:
        print_error(f'Invalid configuration: {_validation_message(e)}')
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Failed to load configuration: {e}')

    try:
        report = asyncio.run(start_crawl(cfg))
    except Exception as e:
        print_error(f'Crawl failed: {e}')

    if json_output:
        try:
            saved = render_json(report, json_output, pretty=pretty)
        except OSError as e:
            print_error(f'Failed to save JSON report: {e}')
        click.echo(f'JSON report: {saved}', err=True)

    if not report.seed_crawled:
        print_error(f'Could not crawl seed URL {cfg.seed_url}')


if __name__ == "__main__":
    cli()
