"""Simple heuristic ghost adapter.

A ghost that can see the actor down a corridor chases it, unless the actor is
powered up, in which case that corridor is avoided. Otherwise the ghost keeps
wandering: a random legal direction that does not reverse its heading, with
reversal only allowed at dead ends.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from pacmind.constants import CARDINALS, Direction, ItemKind
from pacmind.entities.ghost import Ghost
from pacmind.world.board import Board, Cell

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from pacmind.entities.actor import Actor

log = structlog.get_logger()


def _open_moves(ghost: Ghost, board: Board) -> dict[Direction, Cell]:
    """Legal moves that do not step onto another ghost."""
    return {
        d: cell
        for d, cell in board.moves(ghost.cell).items()
        if not isinstance(ghost.layer.entity_at(cell), Ghost)
    }


def choose_ghost_move(
    ghost: Ghost,
    actor: "Actor",
    board: Board,
    rng: "GameRNG",
) -> tuple[Direction, Cell] | None:
    """Return ``(direction, cell)`` for this ghost, or ``None`` to stay put."""
    if ghost.in_box:
        return None
    moves = _open_moves(ghost, board)
    if not moves:
        return None

    seen_in = [
        d for d in CARDINALS if d in moves and ghost.find_item(d, ItemKind.ACTOR) is not None
    ]
    if seen_in and not actor.is_powered_up:
        direction = seen_in[0]
        log.debug("Ghost chasing actor", ghost_id=ghost.ghost_id, direction=direction.name)
        return direction, moves[direction]

    reverse = ghost.direction.opposite
    candidates = [d for d in CARDINALS if d in moves and d is not reverse and d not in seen_in]
    if not candidates:
        candidates = [d for d in CARDINALS if d in moves and d not in seen_in]
    if not candidates:
        # Cornered by a powered actor: any legal move will do.
        candidates = [d for d in CARDINALS if d in moves]
    direction = rng.choice(candidates)
    return direction, moves[direction]


__all__ = ["choose_ghost_move"]
