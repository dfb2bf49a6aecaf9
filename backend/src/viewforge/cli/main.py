"""ViewForge CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """ViewForge: role-scoped view configuration CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register subcommand groups
from viewforge.cli.migrate_cmd import migrate  # noqa: E402
from viewforge.cli.serve_cmd import serve  # noqa: E402
from viewforge.cli.views_cmd import views  # noqa: E402

cli.add_command(migrate)
cli.add_command(serve)
cli.add_command(views)
