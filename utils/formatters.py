"""Formatting utilities for display."""
from datetime import datetime, timezone


def format_price(value):
    """Format a quote price, widening decimals for sub-dollar assets."""
    if value is None:
        return "N/A"
    value = float(value)
    if abs(value) >= 1_000:
        return f"${value:,.2f}"
    if abs(value) >= 1:
        return f"${value:,.4f}"
    if abs(value) >= 0.01:
        return f"${value:.5f}"
    return f"${value:.8f}"


def format_usd(value, compact=False):
    """Format USD value with commas and 2 decimals. Compact mode for large numbers."""
    if value is None:
        return "N/A"
    value = float(value)
    if compact or abs(value) >= 1_000_000_000:
        if abs(value) >= 1_000_000_000:
            return f"${value / 1_000_000_000:,.2f}B"
        elif abs(value) >= 1_000_000:
            return f"${value / 1_000_000:,.2f}M"
        elif abs(value) >= 1_000:
            return f"${value / 1_000:,.1f}K"
    return f"${value:,.2f}"


def format_pct(value, decimals=2, with_color=False):
    """Format percentage with sign. Optionally include rich color markup."""
    if value is None:
        return "N/A"
    value = float(value)
    sign = "+" if value >= 0 else ""
    formatted = f"{sign}{value:.{decimals}f}%"
    if with_color:
        color = "green" if value >= 0 else "red"
        return f"[{color}]{formatted}[/{color}]"
    return formatted


def format_compact(n):
    """Format number compactly: 1200000 → '1.2M'."""
    if n is None:
        return "N/A"
    n = float(n)
    if abs(n) >= 1_000_000_000:
        return f"{n / 1_000_000_000:.1f}B"
    elif abs(n) >= 1_000_000:
        return f"{n / 1_000_000:.1f}M"
    elif abs(n) >= 1_000:
        return f"{n / 1_000:.1f}K"
    return str(int(n))


def confidence_color(confidence):
    """Rich color name for a 0-100 confidence score."""
    if confidence >= 70:
        return "green"
    if confidence >= 50:
        return "yellow"
    if confidence > 0:
        return "red"
    return "dim"


def time_ago(dt, now=None):
    """Return human-readable time since dt. E.g., '3h ago', '2d ago'."""
    if dt is None:
        return "N/A"
    now = now or datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    seconds = int((now - dt).total_seconds())

    if seconds < 60:
        return f"{seconds}s ago"
    elif seconds < 3600:
        return f"{seconds // 60}m ago"
    elif seconds < 86400:
        return f"{seconds // 3600}h ago"
    else:
        return f"{seconds // 86400}d ago"
