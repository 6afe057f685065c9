"""Incremental rating average shared by shops and products."""


def running_average(current: float | None, count: int | None, rating: int) -> float:
    """Fold one more rating into an average built from ``count`` earlier ratings."""
    count = count or 0
    current = current or 0.0
    return round((current * count + rating) / (count + 1), 2)
