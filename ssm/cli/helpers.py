from __future__ import annotations
import click

from ..config import load_typed_config
from ..errors import InvalidInputError
from ..version import __version__


@click.group()
@click.version_option(version=__version__, prog_name="safe-security-matchmaker")
@click.pass_context
def cli(ctx: click.Context):
    """Scoring, pricing and matchmaking engine for vault-raid games.

    \b
    TYPICAL WORKFLOWS:

    \b
    Defence tuning:
      ssm score pattern:0.6 keypad:0.4 timing:0.8 --balance 1500

    \b
    Opponent feed:
      ssm feed --rating 1100 --count 10           # Mixed difficulty feed
      ssm feed --bias hard --seed 7 --json        # Reproducible hard feed
      ssm practice                                # Free tutorial vault

    \b
    Inspection:
      ssm config --section matchmaking

    \b
    All tuning constants can be overridden with SSM__SECTION__KEY environment
    variables, e.g. SSM__MATCHMAKING__VALUE_WEIGHT=0.4.
    """
    if hasattr(ctx, 'obj') and isinstance(ctx.obj, dict):
        ctx.obj = ctx.obj
    else:
        try:
            ctx.obj = load_typed_config().to_dict()
        except InvalidInputError as e:
            raise click.ClickException(f"Invalid configuration: {e}") from None


__all__ = ["cli"]
