"""Long-term spatial memory used to bias exploration.

Two equally shaped grids are kept:

``known``
    Durable memory of where collectibles are believed to be. Cells are filled
    in with the item's code as the actor eats them.
``working``
    A consumable copy of ``known`` taken at the start of a play-through. Cells
    are zeroed as the actor visits them, so the densest remaining quadrant
    points at unexplored food.
"""

from __future__ import annotations

import numpy as np
import structlog

from pacmind.constants import QUADRANT_BIAS, Direction, ItemKind

log = structlog.get_logger()

# Quadrant order is also the tie-break priority.
UPPER_LEFT, UPPER_RIGHT, LOWER_LEFT, LOWER_RIGHT = range(4)

_QUADRANT_DIRECTIONS: dict[int, tuple[Direction, Direction]] = {
    UPPER_LEFT: (Direction.UP, Direction.LEFT),
    UPPER_RIGHT: (Direction.UP, Direction.RIGHT),
    LOWER_LEFT: (Direction.DOWN, Direction.LEFT),
    LOWER_RIGHT: (Direction.DOWN, Direction.RIGHT),
}


def split_point(length: int) -> int:
    """Row/column index where the lower/right quadrants start."""
    return length // 2 + 1


class MemoryModel:
    def __init__(self, template: np.ndarray):
        template = np.asarray(template)
        if template.ndim != 2:
            log.error("Memory template must be 2-D", shape=template.shape)
            raise ValueError("Memory template must be a 2-D grid.")
        rows, cols = template.shape
        if rows < 3 or cols < 3:
            # Splitting at n // 2 + 1 leaves an empty lower/right quadrant below 3.
            log.error("Memory grid too small for quadrant density", shape=template.shape)
            raise ValueError(f"Memory grid {template.shape} is smaller than 3x3.")
        self.known: np.ndarray = np.array(template, dtype=np.int32, copy=True, order="C")
        self.working: np.ndarray = self.known.copy()

    @property
    def shape(self) -> tuple[int, int]:
        return self.known.shape

    def consume(self, row: int, col: int) -> None:
        self.working[row, col] = ItemKind.EMPTY

    def remember(self, row: int, col: int, kind: ItemKind) -> None:
        self.known[row, col] = kind

    def quadrant_densities(self) -> tuple[float, float, float, float]:
        half_r = split_point(self.working.shape[0])
        half_c = split_point(self.working.shape[1])
        w = self.working
        quadrants = (
            w[:half_r, :half_c],
            w[:half_r, half_c:],
            w[half_r:, :half_c],
            w[half_r:, half_c:],
        )
        return tuple(float(q.sum()) / q.size for q in quadrants)  # type: ignore[return-value]

    def densest_quadrant(self, preserve_lower_right_defect: bool = False) -> int | None:
        """Index of the strictly densest quadrant, ``None`` when memory is empty.

        Ties resolve upper-left, upper-right, lower-left, lower-right. With
        ``preserve_lower_right_defect`` the lower-right quadrant is never
        returned, matching the legacy guard that tested lower-left twice.
        """
        densities = self.quadrant_densities()
        best = max(densities)
        if best <= 0:
            return None
        candidates = (UPPER_LEFT, UPPER_RIGHT, LOWER_LEFT)
        if not preserve_lower_right_defect:
            candidates += (LOWER_RIGHT,)
        for quadrant in candidates:
            if densities[quadrant] == best:
                return quadrant
        return None

    def density_bias(
        self, bias: int = QUADRANT_BIAS, preserve_lower_right_defect: bool = False
    ) -> np.ndarray:
        """Per-direction additions pointing at the densest quadrant."""
        out = np.zeros(4, dtype=np.float64)
        quadrant = self.densest_quadrant(preserve_lower_right_defect)
        if quadrant is None:
            return out
        for direction in _QUADRANT_DIRECTIONS[quadrant]:
            out[direction] += bias
        return out

    def check_invariant(self) -> None:
        if np.any(self.working > self.known):
            raise ValueError("Working memory exceeds known memory.")


__all__ = [
    "MemoryModel",
    "split_point",
    "UPPER_LEFT",
    "UPPER_RIGHT",
    "LOWER_LEFT",
    "LOWER_RIGHT",
]
