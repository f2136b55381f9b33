"""CLI scan command for logsize"""

import json
import sys

import click

from logsize.exceptions import LogSizeError
from logsize.patterns import DEFAULT_PATTERN, PATTERNS, RegexSizePattern, SizePattern, get_pattern
from logsize.scheduler import DEFAULT_MAX_WORKERS, ConcurrencyStrategy, scan_directory
from logsize.utils import get_bool_env, get_int_env, get_str_env, resolve_log_level, setup_logging


USAGE = 'Usage: logsize <path-to-log-directory>'


def resolve_pattern(pattern_name: str | None, regexp: str | None) -> SizePattern:
    """Custom regex wins over a named pattern; LOGSIZE_PATTERN fills in when neither is given."""
    if regexp:
        return RegexSizePattern(regexp)
    return get_pattern(pattern_name or get_str_env('LOGSIZE_PATTERN', DEFAULT_PATTERN))


def resolve_strategy(max_workers: int | None, unbounded: bool) -> ConcurrencyStrategy:
    """Build the concurrency strategy from flags, then LOGSIZE_MAX_WORKERS, then the default pool size."""
    if unbounded:
        return ConcurrencyStrategy.unbounded()
    if max_workers is None:
        env_workers = get_int_env('LOGSIZE_MAX_WORKERS')
        max_workers = env_workers if env_workers > 0 else DEFAULT_MAX_WORKERS
    return ConcurrencyStrategy.bounded(max_workers)


@click.command('scan')
@click.argument('log_dir', type=str, required=False, metavar='LOG_DIR')
@click.option(
    '--pattern',
    '-p',
    'pattern_name',
    type=click.Choice(list(PATTERNS)),
    default=None,
    help=f'Built-in size pattern (default: {DEFAULT_PATTERN}, or LOGSIZE_PATTERN)',
)
@click.option(
    '--regex',
    '--regexp',
    '-e',
    'regexp',
    type=str,
    default=None,
    help='Custom size regex with exactly one capturing group (overrides --pattern)',
)
@click.option(
    '--max-workers',
    '-w',
    type=click.IntRange(min=1),
    default=None,
    help=f'Worker pool size (default: {DEFAULT_MAX_WORKERS}, or LOGSIZE_MAX_WORKERS)',
)
@click.option('--unbounded', is_flag=True, help='Use one thread per file instead of a fixed pool')
@click.option(
    '--fail-fast/--keep-going',
    default=None,
    help='Abort on the first unreadable file instead of reporting it and continuing (default: LOGSIZE_FAIL_FAST or keep going)',
)
@click.option(
    '--timeout',
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help='Stop after this many seconds and report a partial total',
)
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
@click.option('--quiet', '-q', is_flag=True, help='Only log warnings and errors')
@click.option('--verbose', '-v', is_flag=True, help='Log debug details')
@click.pass_context
def scan_command(
    ctx,
    log_dir: str | None,
    pattern_name: str | None,
    regexp: str | None,
    max_workers: int | None,
    unbounded: bool,
    fail_fast: bool | None,
    timeout: float | None,
    json_output: bool,
    quiet: bool,
    verbose: bool,
):
    """Sum the response sizes logged in every file directly inside LOG_DIR.

    Prints the total in GB (1 GB = 1000^3 bytes) and the elapsed time.
    Per-file progress is logged to stderr.

    \b
    Examples:
        logsize /var/log/nginx
        logsize /var/log/nginx -p images
        logsize /var/log/nginx -w 2 --fail-fast
        logsize /var/log/nginx --unbounded --timeout 30
    """
    setup_logging(resolve_log_level(quiet=quiet, verbose=verbose))

    if log_dir is None:
        click.echo(USAGE)
        click.echo()
        click.echo(ctx.get_help())
        ctx.exit(0)

    if fail_fast is None:
        fail_fast = get_bool_env('LOGSIZE_FAIL_FAST', False)

    try:
        size_pattern = resolve_pattern(pattern_name, regexp)
        strategy = resolve_strategy(max_workers, unbounded)
        response = scan_directory(
            log_dir,
            size_pattern,
            strategy=strategy,
            fail_fast=fail_fast,
            timeout=timeout,
        )
    except LogSizeError as e:
        click.echo(f'❌ Error: {e}', err=True)
        sys.exit(1)

    if json_output:
        output_data = response.model_dump()
        output_data['total_gb'] = response.total_gb
        click.echo(json.dumps(output_data, indent=2))
    else:
        click.echo(response.to_cli())

    # Exit with error if any file could not be scanned
    if response.errors:
        sys.exit(1)
