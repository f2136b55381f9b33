"""CLI command listing the built-in size patterns"""

import json

import click

from logsize.patterns import DEFAULT_PATTERN, available_patterns


@click.command('patterns')
@click.option('--json', 'json_output', is_flag=True, help='Output in JSON format')
def patterns_command(json_output: bool):
    """List the built-in size patterns and their regexes."""
    patterns = available_patterns()

    if json_output:
        data = [
            {
                'name': p.name,
                'description': p.description,
                'regex': p.regex.pattern,
                'default': p.name == DEFAULT_PATTERN,
            }
            for p in patterns
        ]
        click.echo(json.dumps(data, indent=2))
        return

    for p in patterns:
        marker = ' (default)' if p.name == DEFAULT_PATTERN else ''
        click.echo(f'{p.name}{marker}: {p.description}')
        click.echo(f'  {p.regex.pattern}')
