"""Opponent feed commands."""

from __future__ import annotations
import click
import json as _json
import logging
import random
from datetime import datetime, timezone

from .helpers import cli
from ..catalog import resolve_challenge_type
from ..config import as_typed_config
from ..engine import build_engine
from ..errors import InvalidInputError
from ..matchmaking.ranker import is_attackable
from ..services.feed_service import build_feed
from ..utils.output import band_badge, chance_badge, divider, section_header, warning

logger = logging.getLogger(__name__)


def _format_vault_line(position: int, vault) -> str:
    types = ", ".join(m.type.value for m in vault.loadout.modules)
    return (
        f"{position:2d}. {vault.owner_name:<14} "
        f"balance {vault.balance:>6.0f}  "
        f"score {vault.security_score:5.1f} {band_badge(vault.difficulty_band.value):<6}  "
        f"fee {vault.attack_fee:>4}  "
        f"chance {chance_badge(vault.success_chance.value)}  "
        f"[{types}]"
    )


@cli.command()
@click.option('--rating', type=float, default=None, help='Attacker rating (default: matchmaking.default_rating)')
@click.option('--count', type=int, default=10, show_default=True, help='Number of opponents to generate')
@click.option('--bias', type=click.Choice(['easy', 'mixed', 'hard']), default=None, help='Force one difficulty bias')
@click.option('--seed', type=int, default=None, help='Seed for a reproducible feed')
@click.option('--recent', 'recent', multiple=True, help='Vault id attacked recently (repeatable, most recent first)')
@click.option('--type', 'types', multiple=True, help='Restrict loadouts to this challenge type (repeatable)')
@click.option('--json', 'as_json', is_flag=True, help='Emit the ranked feed as JSON')
@click.pass_context
def feed(ctx: click.Context, rating: float | None, count: int, bias: str | None, seed: int | None,
         recent: tuple[str, ...], types: tuple[str, ...], as_json: bool):
    """Generate and rank an opponent feed.

    Vaults are ordered by Target Attractiveness Score: payoff, ease,
    freshness and rating fairness, minus a penalty for recently attacked
    targets.
    """
    cfg = ctx.obj
    try:
        preferred = [resolve_challenge_type(t) for t in types] or None
        result = build_feed(
            config=cfg,
            rating=rating,
            count=count,
            seed=seed,
            bias=bias,
            recently_attacked=recent,
            preferred_types=preferred,
        )
    except InvalidInputError as e:
        click.echo(click.style(f"Error: {e}", fg='red'))
        ctx.exit(1)
        return

    if as_json:
        click.echo(_json.dumps([v.to_dict() for v in result.vaults], indent=2))
        return

    click.echo(section_header(f"Opponent feed (rating {result.rating:.0f})"))
    if not result.vaults:
        click.echo(warning("No opponents requested"))
        return
    now = datetime.now(timezone.utc)
    for position, vault in enumerate(result.vaults, start=1):
        line = _format_vault_line(position, vault)
        if not is_attackable(vault, now):
            line += click.style("  (cooldown)", fg='bright_black')
        click.echo(line)
    click.echo(divider())
    click.echo(f"{result.band_counts['soft']} soft, {result.band_counts['tricky']} tricky, "
               f"{result.band_counts['brutal']} brutal")


@cli.command()
@click.option('--seed', type=int, default=None, help='Seed for a reproducible practice vault')
@click.option('--json', 'as_json', is_flag=True, help='Emit the vault as JSON')
@click.pass_context
def practice(ctx: click.Context, seed: int | None, as_json: bool):
    """Show the free, guaranteed-easy tutorial vault."""
    engine = build_engine(as_typed_config(ctx.obj))
    vault = engine.generator.practice_vault(random.Random(seed))
    if as_json:
        click.echo(_json.dumps(vault.to_dict(), indent=2))
        return
    click.echo(section_header("Practice vault"))
    click.echo(_format_vault_line(1, vault))


__all__ = ["feed", "practice"]
