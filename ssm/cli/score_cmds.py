"""Loadout scoring command."""

from __future__ import annotations
import click
import logging

from .helpers import cli
from ..errors import InvalidInputError
from ..services.loadout_service import evaluate_loadout, parse_module_spec
from ..utils.output import band_badge, info, section_header, success, warning

logger = logging.getLogger(__name__)


@cli.command()
@click.argument('modules', nargs=-1, required=True)
@click.option('--balance', type=click.FloatRange(min=0.0), default=1000.0, show_default=True, help='Vault balance to price against')
@click.option('--rating', type=click.FloatRange(min=0.0), default=None, help='Typical attacker rating (default: economy.reference_rating)')
@click.pass_context
def score(ctx: click.Context, modules: tuple[str, ...], balance: float, rating: float | None):
    """Score a defence loadout given as CHALLENGE:DIFFICULTY pairs.

    Challenge names are matched loosely, so "safe dial", "safedial" and
    "safe dail" all resolve to the same challenge.

    \b
    Example:
        ssm score pattern:0.6 keypad:0.4 timing:0.8 --balance 1500
    """
    cfg = ctx.obj
    try:
        parsed = [parse_module_spec(spec) for spec in modules]
        report = evaluate_loadout(parsed, balance, rating=rating, config=cfg)
    except InvalidInputError as e:
        raise click.BadParameter(str(e), param_hint="MODULES") from None

    stats = report.stats
    click.echo(section_header("Loadout"))
    for module in report.loadout.modules:
        click.echo(info(f"{module.name:<20} difficulty {module.difficulty:.2f}  weight {module.weight:.1f}"))
    click.echo("")
    click.echo(success(f"Security score {report.score:.1f} ({band_badge(report.band)})"))
    click.echo(info(f"Attack fee: {stats.attack_fee}"))
    click.echo(info(f"Potential loot: {stats.potential_loot:.0f}"))
    click.echo(info(f"Typical attacker success: {stats.success_probability:.1%}"))
    click.echo(info(f"Estimated attacks/day: {stats.estimated_attacks_per_day}"))
    click.echo(info(f"Fail income/day: {stats.estimated_fail_income_per_day}"))
    click.echo(info(f"Breach risk/day: {stats.estimated_breach_risk_per_day}"))
    if stats.recommended_insurance:
        click.echo(warning("Breach risk exceeds fail income. Insurance is recommended."))


__all__ = ["score"]
