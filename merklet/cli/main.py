"""
CLI entry point for Merklet.

Provides command-line interface for computing Merkle roots over leaf files,
inspecting tree structure, and generating and verifying inclusion proofs.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from merklet._version import __version__
from merklet.config.settings import get_default_config_path, load_config
from merklet.exceptions import InvalidConfigurationError
from merklet.logging_config import bind_run_id, get_logger, setup_logging
from merklet.cli.context import CLIContext, pass_context


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (overrides configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='merklet')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    Merklet - Merkle trees over ordered collections of items.

    Computes root digests that commit to every leaf and its position.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    # Quiet stderr logging until the configuration says otherwise
    setup_logging(level=log_level or "WARNING", json_format=False)

    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    try:
        effective_log_level = log_level.upper() if log_level else ctx.config.logging.level
        log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
        setup_logging(
            level=effective_log_level,
            log_file=log_file,
            json_format=ctx.config.logging.format == "json",
        )
        bind_run_id()

        if verbose:
            logger = get_logger("merklet.cli")
            logger.info(f"Loaded configuration from: {ctx.config_path or 'defaults'}")
            logger.info(f"Log level: {effective_log_level}")
    except OSError as e:
        click.echo(f"Error: Failed to set up logging: {e}", err=True)
        sys.exit(1)


# Import and register tree commands
from merklet.cli.tree import proof, root, show, verify
cli.add_command(root)
cli.add_command(show)
cli.add_command(proof)
cli.add_command(verify)


if __name__ == '__main__':
    cli()
