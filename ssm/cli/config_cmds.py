"""Configuration display commands."""

from __future__ import annotations
import click
import json as _json

from .helpers import cli


@cli.command(name="config")
@click.option("--section", "-s", help="Only show a specific top-level section (e.g. scoring, economy, matchmaking).")
@click.pass_context
def show_config(ctx: click.Context, section: str | None):
    """Show current configuration settings."""
    data = ctx.obj
    if section:
        section = section.lower()
        if section not in data:
            raise click.UsageError(f"Unknown section '{section}'. Available: {', '.join(sorted(data.keys()))}")
        data = {section: data[section]}
    click.echo(_json.dumps(data, indent=2, sort_keys=True))


__all__ = ["show_config"]
