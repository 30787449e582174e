"""
Palette Selection Module

Orders candidate colors (grid regions or cluster centroids) by hue and
selects the entries that make up the output palette.

Selection rules:
- rank: fixed positions in the hue-sorted list. On a 4x4 grid the defaults
  are positions 3 and 11; for other candidate counts they are scaled
  proportionally.
- saturation: the most saturated candidates, emitted in hue order.
- all: every candidate in hue order.
"""

from typing import List, Optional, Protocol, Sequence, Tuple, TypeVar

from loguru import logger

from .conversion import HSL, rgb_to_hsl
from .errors import InvalidInput

# Rank positions of the reference 4x4 grid
DEFAULT_RANKS: Tuple[int, ...] = (3, 11)
DEFAULT_RANK_BASE = 16

SELECTIONS = ("rank", "saturation", "all")


class Candidate(Protocol):
    rgb: Tuple[int, int, int]


C = TypeVar("C", bound=Candidate)


def candidate_hsl(candidate: Candidate) -> HSL:
    return rgb_to_hsl(*candidate.rgb)


def sort_by_hue(candidates: Sequence[C]) -> List[C]:
    """Sort ascending by hue; equal hues keep their input order."""
    return sorted(candidates, key=lambda c: candidate_hsl(c).h)


def default_ranks(n: int) -> Tuple[int, ...]:
    """Scale the 4x4 reference rank positions to a list of n candidates."""
    return tuple((n * rank) // DEFAULT_RANK_BASE for rank in DEFAULT_RANKS)


def select_by_rank(sorted_candidates: Sequence[C], ranks: Sequence[int]) -> List[C]:
    """Pick entries of an already hue-sorted list by position."""
    n = len(sorted_candidates)
    for rank in ranks:
        if rank < 0 or rank >= n:
            raise InvalidInput(f"Rank {rank} out of range for {n} candidates")
    return [sorted_candidates[rank] for rank in ranks]


def select_by_saturation(candidates: Sequence[C], count: int) -> List[C]:
    """Pick the ``count`` most saturated candidates and return them in hue order."""
    if count <= 0:
        raise InvalidInput(f"Palette size must be positive, got {count}")
    if count > len(candidates):
        raise InvalidInput(f"Palette size {count} exceeds {len(candidates)} candidates")

    by_saturation = sorted(candidates, key=lambda c: -candidate_hsl(c).s)
    return sort_by_hue(by_saturation[:count])


def select_palette(candidates: Sequence[C], selection: str = "rank",
                   ranks: Optional[Sequence[int]] = None,
                   count: int = 2) -> List[C]:
    """
    Order candidates by hue and choose the palette entries.

    Args:
        candidates: Region or cluster colors in spatial/cluster order
        selection: "rank", "saturation" or "all"
        ranks: Explicit rank positions for "rank" (defaults scale with size)
        count: Palette size for "saturation"

    Returns:
        Selected candidates in output order

    Raises:
        InvalidInput: For empty input, unknown rules or out-of-range ranks
    """
    if not candidates:
        raise InvalidInput("No candidate colors to select from")

    if selection == "rank":
        if ranks is None:
            ranks = default_ranks(len(candidates))
        selected = select_by_rank(sort_by_hue(candidates), ranks)
    elif selection == "saturation":
        selected = select_by_saturation(candidates, count)
    elif selection == "all":
        selected = sort_by_hue(candidates)
    else:
        raise InvalidInput(f"Unknown selection rule: {selection}")

    logger.debug(f"Selected {len(selected)} of {len(candidates)} candidates by {selection}")
    return selected
