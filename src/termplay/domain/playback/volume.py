"""Live volume adjustment."""

VOLUME_RATIO = 0.1
MIN_VOLUME = 0.05
MAX_VOLUME = 3.0


def adjust_volume(volume: float, increase: bool) -> float:
    """Step a volume up or down by a fixed ratio, clamped to [MIN, MAX].

    Up divides by (1 - ratio) and down multiplies by it, so the two steps are
    not exact inverses.
    """
    if increase:
        return min(volume / (1.0 - VOLUME_RATIO), MAX_VOLUME)
    return max(volume * (1.0 - VOLUME_RATIO), MIN_VOLUME)
