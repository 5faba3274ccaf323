"""Logging helper utilities for consistent progress reporting."""

import logging
import click

logger = logging.getLogger(__name__)


def log_progress(
    processed: int,
    total: int | None,
    elapsed_seconds: float = 0.0,
    item_name: str = "vaults",
    **counts: int,
) -> None:
    """Log progress info with consistent formatting.

    Args:
        processed: Number of items processed so far
        total: Total number of items (None if unknown)
        elapsed_seconds: Time elapsed since start
        item_name: Name of items being processed (e.g., "vaults")
        **counts: Extra labelled counts, e.g. ``easy=3, hard=2`` (zero counts omitted)
    """
    parts = [
        f"{click.style(f'{processed}', fg='cyan')} {item_name} processed"
    ]

    if total:
        pct = (processed / total * 100) if total > 0 else 0
        parts[0] = f"{click.style(f'{processed}/{total}', fg='cyan')} {item_name} ({pct:.0f}%)"

    for label, count in counts.items():
        if count > 0:
            parts.append(click.style(f"{count} {label}", fg='blue'))

    if elapsed_seconds > 0:
        rate = processed / elapsed_seconds
        parts.append(f"{rate:.1f} {item_name}/s")

    logger.info(" | ".join(parts))


def format_band_summary(
    soft: int,
    tricky: int,
    brutal: int,
    duration_seconds: float = 0.0,
    item_name: str = "Feed",
) -> str:
    """Format a summary line with colored difficulty band counts.

    Args:
        soft: Count of soft vaults
        tricky: Count of tricky vaults
        brutal: Count of brutal vaults
        duration_seconds: Total duration in seconds
        item_name: Label of the summarised batch

    Returns:
        Formatted summary string with colors
    """
    parts = [
        click.style('✓', fg='green'),
        f"{item_name}:",
        click.style(f'{soft} soft', fg='green'),
        click.style(f'{tricky} tricky', fg='yellow'),
        click.style(f'{brutal} brutal', fg='red'),
    ]

    if duration_seconds > 0:
        parts.append(f"in {duration_seconds:.2f}s")

    return " ".join(parts)


__all__ = ["log_progress", "format_band_summary"]
