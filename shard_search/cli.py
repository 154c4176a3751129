"""
Command Line Interface for parallel shard search
"""
import json
import sys
import click
from shard_search.core.config import Config
from shard_search.core.errors import ShardSearchError
from shard_search.core.plan import partition
from shard_search.search.engine import SearchEngine
from shard_search.utils.helpers import format_plan
from shard_search.utils.logger import setup_logging


def _load_config(ctx) -> Config:
    config_file = ctx.obj.get('config_file')
    config = Config.load_from_file(config_file) if config_file else Config.from_env()
    if ctx.obj.get('verbose'):
        config.logging.level = 'DEBUG'
    setup_logging(config.logging.level, config.logging.file, config.logging.format)
    return config


@click.group()
@click.option('--config', '-c', help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """Parallel Shard Search CLI"""
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose


@cli.command()
@click.argument('pattern')
@click.argument('file', type=click.Path(dir_okay=False))
@click.option('--workers', '-w', type=click.IntRange(min=1), help='Number of workers (threads backend)')
@click.option('--backend', type=click.Choice(['threads', 'mpi']), help='Worker runtime')
@click.option('--exclude-trailing', type=click.IntRange(min=0),
              help='Bytes at the end of FILE that are not searched')
@click.option('--algorithm', type=click.Choice(['brute_force', 'find']), help='Local scan algorithm')
@click.option('--output', '-o', help='Output file for results (JSON format)')
@click.pass_context
def search(ctx, pattern, file, workers, backend, exclude_trailing, algorithm, output):
    """Print every offset of PATTERN in FILE, one per line"""
    try:
        config = _load_config(ctx)
        if workers is not None:
            config.cluster.workers = workers
        if backend is not None:
            config.cluster.backend = backend
        if exclude_trailing is not None:
            config.search.exclude_trailing_bytes = exclude_trailing
        if algorithm is not None:
            config.search.algorithm = algorithm

        result = SearchEngine(config).search_file(file, pattern)
    except ShardSearchError as e:
        click.echo(f"Search error: {e}", err=True)
        sys.exit(1)

    # Non-root MPI ranks have nothing to report
    if result is None:
        return

    for offset in result:
        click.echo(offset)

    if output:
        with open(output, 'w') as f:
            json.dump(result.model_dump(), f, indent=2)
        click.echo(f"Results saved to {output}", err=True)


@cli.command()
@click.argument('length', type=click.IntRange(min=1))
@click.argument('pattern_length', type=click.IntRange(min=1))
@click.option('--workers', '-w', type=click.IntRange(min=1), help='Number of workers')
@click.pass_context
def plan(ctx, length, pattern_length, workers):
    """Show how LENGTH bytes would be sharded for a PATTERN_LENGTH-byte pattern"""
    try:
        config = _load_config(ctx)
        shard_plan = partition(length, pattern_length, workers or config.cluster.workers)
    except ShardSearchError as e:
        click.echo(f"Plan error: {e}", err=True)
        sys.exit(1)

    for line in format_plan(shard_plan):
        click.echo(line)


@cli.command()
@click.option('--output', '-o', default='shard_search.json', help='Output configuration file')
def init_config(output):
    """Initialize a configuration file with default settings"""
    Config().save_to_file(output)
    click.echo(f"Configuration file created: {output}")
    click.echo("Edit the file to customize settings, then use:")
    click.echo(f"  shard-search --config {output} search PATTERN FILE")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()
