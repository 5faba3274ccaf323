"""Output formatting utilities for consistent CLI reporting."""

import click


def section_header(text: str) -> str:
    """Format a section header with color.

    Args:
        text: Header text

    Returns:
        Formatted header string
    """
    return click.style(f"▶ {text}", fg='cyan', bold=True)


def success(text: str, prefix: str = "✓") -> str:
    """Format a success message."""
    return f"{click.style(prefix, fg='green')} {text}"


def warning(text: str, prefix: str = "⚠") -> str:
    """Format a warning message."""
    return f"{click.style(prefix, fg='yellow')} {text}"


def info(text: str) -> str:
    """Format an info message."""
    return f"  {click.style('•', fg='blue')} {text}"


_BAND_COLORS = {"soft": "green", "tricky": "yellow", "brutal": "red"}
_CHANCE_COLORS = {"high": "green", "medium": "yellow", "low": "red"}


def band_badge(band: str) -> str:
    """Color a difficulty band label."""
    return click.style(band, fg=_BAND_COLORS.get(band, 'white'), bold=True)


def chance_badge(chance: str) -> str:
    """Color a success chance label."""
    return click.style(chance, fg=_CHANCE_COLORS.get(chance, 'white'))


def divider() -> str:
    """Return a visual divider line."""
    return click.style("─" * 60, fg='bright_black')
