"""
Helper functions for formatting cache data into human-readable strings.
"""

from datetime import datetime


def format_size(bytes_size: float) -> str:
    """Formats bytes into a human-readable size string (e.g., '14.2 KB')."""
    if bytes_size <= 0:
        return "0 B"
    units = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while bytes_size >= 1024 and i < len(units) - 1:
        bytes_size /= 1024
        i += 1
    return f"{bytes_size:.1f} {units[i]}"


def format_mtime(timestamp: float) -> str:
    """Formats a file modification time as local date and time."""
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def truncate_repr(value: object, max_length: int = 120) -> str:
    """Returns repr(value), shortened with an ellipsis past max_length characters."""
    text = repr(value)
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"
