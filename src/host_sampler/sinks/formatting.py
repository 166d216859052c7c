"""Display formatting helpers (byte quantities, rates, percentage bars)."""

BYTE_UNIT = 1024
BYTE_PREFIXES = "KMGTPE"

BAR_FILLED = "█"
BAR_EMPTY = "░"


def format_bytes(num_bytes: int) -> str:
    """Format a byte count with binary (1024-based) prefixes.

    Picks the largest prefix that keeps the scaled value below 1024 and
    shows two decimals; counts below 1024 are shown as whole bytes.

    Examples:
        >>> format_bytes(999)
        '999 B'
        >>> format_bytes(1536)
        '1.50 KB'
        >>> format_bytes(1048576)
        '1.00 MB'
    """
    num_bytes = int(num_bytes)
    if num_bytes < BYTE_UNIT:
        return f"{num_bytes} B"

    divisor, exponent = BYTE_UNIT, 0
    scaled = num_bytes // BYTE_UNIT
    while scaled >= BYTE_UNIT and exponent < len(BYTE_PREFIXES) - 1:
        divisor *= BYTE_UNIT
        exponent += 1
        scaled //= BYTE_UNIT
    return f"{num_bytes / divisor:.2f} {BYTE_PREFIXES[exponent]}B"


def format_rate(bytes_per_second: float) -> str:
    """Format a byte rate, e.g. `1.00 KB/s`."""
    return f"{format_bytes(max(0, int(bytes_per_second)))}/s"


def render_bar(percent: float, width: int = 50) -> str:
    """Render a fixed-width block/track bar proportional to `percent`."""
    filled = int(percent * width / 100)
    filled = min(max(filled, 0), width)
    return BAR_FILLED * filled + BAR_EMPTY * (width - filled)
