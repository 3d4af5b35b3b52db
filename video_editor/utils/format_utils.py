"""
This module contains helper functions for formatting data into strings, either
for ffmpeg's command line or for human-readable log messages.
"""

from datetime import timedelta

_SIZE_UNITS = ("KB", "MB", "GB", "TB", "PB")


def duration_format(duration: float) -> str:
    """
    Formats a number of seconds as an ffmpeg time string "HH:MM:SS(.fraction)".

    Hours and minutes are each written as a literal "0" followed by the integer
    value, so 5 minutes becomes "05" and 12 minutes becomes "012" (ffmpeg
    accepts both). Seconds keep their full fractional precision; whole values
    are written without a fraction and the integer part is padded to two digits.

    Examples:
        2.0    -> "00:00:02"
        5.5    -> "00:00:05.5"
        3725.0 -> "01:02:05"

    Args:
        duration: The time in seconds. Must not be negative.

    Returns:
        The formatted time string.
    """
    hours = int(duration / 3600)
    duration -= hours * 3600
    minutes = int(duration / 60)
    duration -= minutes * 60
    return f"0{hours}:0{minutes}:{_format_seconds(duration)}"


def _format_seconds(seconds: float) -> str:
    text = repr(float(seconds))
    if "e" in text:
        # ffmpeg does not parse exponent notation
        text = f"{seconds:.9f}".rstrip("0").rstrip(".")
    elif text.endswith(".0"):
        text = text[:-2]
    whole, dot, fraction = text.partition(".")
    return f"{whole.zfill(2)}{dot}{fraction}"


def format_timedelta(elapsed: timedelta) -> str:
    """Elapsed time as "HH:MM:SS", whole seconds only."""
    minutes, seconds = divmod(int(elapsed.total_seconds()), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02}:{minutes:02}:{seconds:02}"


def formatted_size(size_bytes: int) -> str:
    """
    Human-readable file size with binary units.

    Byte counts are printed as integers; larger units get two decimals, with a
    trailing ".00" dropped. 1536 -> "1.50 KB", 2097152 -> "2 MB".
    """
    if size_bytes < 1024:
        return f"{max(size_bytes, 0)} B"

    value = float(size_bytes)
    for unit in _SIZE_UNITS:
        value /= 1024
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            break
    text = f"{value:.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    return f"{text} {unit}"
