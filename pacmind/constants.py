from enum import IntEnum
from typing import Final


class Direction(IntEnum):
    """Cardinal movement directions.

    The first four members double as indices into the per-direction weight and
    neighbour arrays, so their order is also the evaluation order of the
    decision engine.
    """

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    NONE = 4

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def delta(self) -> tuple[int, int]:
        """Return the ``(d_row, d_col)`` step for this direction."""
        return _DELTAS[self]


_OPPOSITES: Final[dict[Direction, Direction]] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
    Direction.NONE: Direction.NONE,
}

_DELTAS: Final[dict[Direction, tuple[int, int]]] = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
    Direction.NONE: (0, 0),
}

CARDINALS: Final[tuple[Direction, ...]] = (
    Direction.UP,
    Direction.DOWN,
    Direction.LEFT,
    Direction.RIGHT,
)


class ItemKind(IntEnum):
    """Occupants of the item layer.

    The value is the point value when eaten and the weight stored in memory.
    """

    EMPTY = 0
    ACTOR = 1
    BISCUIT = 10
    PILL = 100
    GHOST = 200


# Kinds reported by a directional tally. The actor is counted as empty.
TALLY_KINDS: Final[tuple[ItemKind, ...]] = (
    ItemKind.EMPTY,
    ItemKind.BISCUIT,
    ItemKind.PILL,
    ItemKind.GHOST,
)
COLLECTIBLES: Final[frozenset[ItemKind]] = frozenset({ItemKind.BISCUIT, ItemKind.PILL})
ENTITY_KINDS: Final[frozenset[ItemKind]] = frozenset({ItemKind.ACTOR, ItemKind.GHOST})


class GameMode(IntEnum):
    WAITING = 0
    PLAYING = 1
    FINISHED = 2


# --- Decision defaults ---
MAX_VIEW_DISTANCE: Final[int] = 10
PILL_TIMER_MAX: Final[int] = 30
POWER_THRESHOLD: Final[int] = 3
REVERSAL_PENALTY: Final[int] = 3
QUADRANT_BIAS: Final[int] = 2
GHOST_RESPAWN_DELAY: Final[int] = 5

__all__ = [
    "Direction",
    "CARDINALS",
    "ItemKind",
    "TALLY_KINDS",
    "COLLECTIBLES",
    "ENTITY_KINDS",
    "GameMode",
    "MAX_VIEW_DISTANCE",
    "PILL_TIMER_MAX",
    "POWER_THRESHOLD",
    "REVERSAL_PENALTY",
    "QUADRANT_BIAS",
    "GHOST_RESPAWN_DELAY",
]
