"""Decision making for the actor and the ghosts.

``decision`` holds the actor's weighted move selection, ``memory`` the
quadrant-density exploration bias it relies on, and ``ghost_ai`` the simple
policy driving hostile entities.
"""

from __future__ import annotations

from .decision import DecisionConfig, Move, compute_next_move, item_weight
from .ghost_ai import choose_ghost_move
from .memory import MemoryModel

__all__ = [
    "DecisionConfig",
    "Move",
    "MemoryModel",
    "choose_ghost_move",
    "compute_next_move",
    "item_weight",
]
