"""Main CLI entry point with command groups"""

import click

from logsize.__version__ import __version__
from logsize.cli.patterns import patterns_command
from logsize.cli.scan import scan_command


class DefaultCommandGroup(click.Group):
    """Group that routes anything that is not a subcommand to `scan`.

    `logsize /var/log/nginx` is shorthand for `logsize scan /var/log/nginx`.
    """

    default_command = 'scan'
    passthrough = ('--help', '--version')

    def parse_args(self, ctx, args):
        if ctx.resilient_parsing or (args and (args[0] in self.commands or args[0] in self.passthrough)):
            return super().parse_args(ctx, args)
        return super().parse_args(ctx, [self.default_command, *args])


@click.group(cls=DefaultCommandGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name='logsize')
@click.pass_context
def cli(ctx):
    """
    logsize - total response size across a directory of access logs.

    \b
    Commands:
      logsize <log-dir>         Sum response sizes (default command)
      logsize patterns          List built-in size patterns

    \b
    Examples:
      logsize /var/log/nginx
      logsize /var/log/nginx --pattern images
      logsize /var/log/nginx --unbounded --fail-fast
      logsize /var/log/nginx -e '" 200 (\\d+) ' --json
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)


# Register subcommands (scan is the default command)
cli.add_command(scan_command, name='scan')
cli.add_command(patterns_command, name='patterns')


def main():
    """Entry point for the CLI"""
    cli()


if __name__ == '__main__':
    main()
