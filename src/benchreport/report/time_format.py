"""Human-scaled time formatting."""

# Largest unit first; the first threshold the value reaches wins.
TIME_UNITS = (
    (1.0, 1.0, "s"),
    (1e-3, 1e3, "ms"),
    (1e-6, 1e6, "μs"),
)
NANOSECONDS = (1e9, "ns")


def format_time_human_readable(seconds: float) -> str:
    """Format a duration with the largest unit that keeps it >= 1.

    >>> format_time_human_readable(0.0015)
    '1.5ms'
    """
    factor, unit = NANOSECONDS
    for threshold, unit_factor, unit_name in TIME_UNITS:
        if seconds >= threshold:
            factor, unit = unit_factor, unit_name
            break

    text = f"{seconds * factor:.3f}".rstrip("0").rstrip(".")
    return f"{text}{unit}"
