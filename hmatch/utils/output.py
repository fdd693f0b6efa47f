"""Output formatting utilities for consistent CLI reporting."""

import click


def section_header(text: str) -> str:
    """Format a section header with color."""
    return click.style(f"▶ {text}", fg='cyan', bold=True)


def success(text: str, prefix: str = "✓") -> str:
    """Format a success message.

    Args:
        text: Message text
        prefix: Prefix character (default: ✓)

    Returns:
        Formatted success string
    """
    return f"{click.style(prefix, fg='green')} {text}"


def error(text: str, prefix: str = "✗") -> str:
    """Format an error message.

    Args:
        text: Message text
        prefix: Prefix character (default: ✗)

    Returns:
        Formatted error string
    """
    return f"{click.style(prefix, fg='red')} {text}"


def warning(text: str, prefix: str = "⚠") -> str:
    return f"{click.style(prefix, fg='yellow')} {text}"


def info(text: str) -> str:
    return f"  {click.style('•', fg='blue')} {text}"


def score_bar(achieved: float, possible: float, width: int = 20) -> str:
    """Render achieved/possible as a fixed-width bar.

    Args:
        achieved: Weighted achieved score
        possible: Weighted possible score
        width: Number of bar cells

    Returns:
        Colored bar string; empty cells only when possible is 0
    """
    ratio = achieved / possible if possible > 0 else 0.0
    ratio = min(max(ratio, 0.0), 1.0)
    filled = int(round(ratio * width))
    color = 'green' if ratio >= 0.75 else 'yellow' if ratio >= 0.4 else 'red'
    return click.style("█" * filled, fg=color) + click.style("░" * (width - filled), fg='bright_black')


def divider() -> str:
    """Return a visual divider line."""
    return click.style("─" * 60, fg='bright_black')


__all__ = [
    "section_header",
    "success",
    "error",
    "warning",
    "info",
    "score_bar",
    "divider",
]
