# pacmind/entities/ghost.py
from __future__ import annotations

from typing import Self

import structlog

from pacmind.constants import GHOST_RESPAWN_DELAY, Direction, ItemKind
from pacmind.entities.entity import Entity
from pacmind.world.board import Board, Cell
from pacmind.world.items import ItemLayer

log = structlog.get_logger()


class Ghost(Entity):
    """Hostile wanderer. When eaten it leaves the board for a few ticks."""

    kind = ItemKind.GHOST

    def __init__(
        self: Self,
        board: Board,
        layer: ItemLayer,
        home: Cell,
        respawn_delay: int = GHOST_RESPAWN_DELAY,
        ghost_id: int = 0,
    ):
        super().__init__(board, layer, None)
        if not home.passable:
            raise ValueError(f"Ghost home {home.pos} is a blocked cell.")
        self.home = home
        self.respawn_delay = respawn_delay
        self.respawn_timer: int = 0
        self.ghost_id = ghost_id

    @property
    def in_box(self: Self) -> bool:
        """True while the ghost is waiting off the board to respawn."""
        return self.cell is None

    def send_home(self: Self) -> None:
        """Leave the current cell (restoring its item) and wait to respawn."""
        log.debug(
            "Ghost sent home",
            ghost_id=self.ghost_id,
            from_cell=None if self.cell is None else self.cell.pos,
            delay=self.respawn_delay,
        )
        self.restore_background()
        self.place_at(None)
        self.respawn_timer = self.respawn_delay

    def tick_respawn(self: Self) -> bool:
        """Count down while in the box; re-enter at home when free. Returns True on respawn."""
        if not self.in_box:
            return False
        if self.respawn_timer > 0:
            self.respawn_timer -= 1
        if self.respawn_timer > 0:
            return False
        if self.layer.entity_at(self.home) is not None:
            return False
        self.spawn(self.home, Direction.NONE)
        log.debug("Ghost respawned", ghost_id=self.ghost_id, cell=self.home.pos)
        return True


__all__ = ["Ghost"]
