"""
Play order selection.

The random source is always passed in so callers (and tests) decide whether
it is seeded.
"""

import random

from termplay.domain.playlists.models import RandomMode


def pass_order(count: int, mode: RandomMode, rng: random.Random) -> list[int]:
    """Indices of one full pass over a playlist of `count` songs.

    Every index in [0, count) appears exactly once. OFF keeps playlist order;
    SHUFFLE and TRUE return a uniformly random permutation.

    Args:
        count: Number of songs in the playlist
        mode: Configured random mode
        rng: Source of randomness

    Returns:
        List of song indices in play order
    """
    order = list(range(count))
    if mode is not RandomMode.OFF:
        rng.shuffle(order)
    return order


def random_pick(count: int, rng: random.Random) -> int:
    """Pick one index uniformly from [0, count), ignoring earlier picks.

    The song that just played can be picked again.
    """
    return rng.randrange(count)
