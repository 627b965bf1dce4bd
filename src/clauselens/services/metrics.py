"""
Zero-safe arithmetic shared by comparison and analytics.
"""


def safe_ratio(numerator: float, denominator: float, digits: int = 2) -> float:
    """numerator / denominator, or 0 when the denominator is 0."""
    if not denominator:
        return 0.0
    return round(numerator / denominator, digits)


def safe_percentage(part: float, whole: float, digits: int = 1) -> float:
    """part as a percentage of whole, or 0 when whole is 0."""
    if not whole:
        return 0.0
    return round(part / whole * 100, digits)
