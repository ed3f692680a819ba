"""Belt ranks and their total order"""

from enum import Enum
from typing import Optional


class BeltRank(str, Enum):
    """Belt ranks, declared lowest to highest"""
    WHITE = "white"
    YELLOW = "yellow"
    ORANGE = "orange"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    RED = "red"
    BROWN = "brown"
    BLACK = "black"


RANK_ORDER: dict[BeltRank, int] = {rank: index for index, rank in enumerate(BeltRank)}

LOWEST_RANK = BeltRank.WHITE


def rank_order(rank: Optional[BeltRank]) -> int:
    """Ordinal of a rank; a subject with no recorded rank is treated as the lowest"""
    return RANK_ORDER[rank or LOWEST_RANK]
