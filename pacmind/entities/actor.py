# pacmind/entities/actor.py
from __future__ import annotations

from typing import Self

import numpy as np
import structlog

from pacmind.ai.memory import MemoryModel
from pacmind.constants import PILL_TIMER_MAX, Direction, ItemKind
from pacmind.entities.entity import Entity
from pacmind.entities.ghost import Ghost
from pacmind.world.board import Board, Cell
from pacmind.world.items import ItemLayer

log = structlog.get_logger()


class Actor(Entity):
    """The forager whose moves are picked by the decision engine.

    Eating adds the item's code to ``score``. Biscuits and pills are written
    into ``memory.known``; every arrival zeroes ``memory.working`` at the
    destination.
    """

    kind = ItemKind.ACTOR

    def __init__(
        self: Self,
        board: Board,
        layer: ItemLayer,
        cell: Cell | None,
        memory_template: np.ndarray,
        pill_timer_max: int = PILL_TIMER_MAX,
    ):
        super().__init__(board, layer, cell)
        if tuple(np.shape(memory_template)) != board.shape:
            log.error(
                "Memory shape mismatch",
                memory=np.shape(memory_template),
                board=board.shape,
            )
            raise ValueError("Actor memory must share the board's shape.")
        self.score: int = 0
        self.power_timer: int = 0
        self.pill_timer_max = pill_timer_max
        self.weights: np.ndarray = np.zeros(4, dtype=np.float64)
        self.memory = MemoryModel(memory_template)

    @property
    def known(self: Self) -> np.ndarray:
        return self.memory.known

    @property
    def working(self: Self) -> np.ndarray:
        return self.memory.working

    @property
    def is_powered_up(self: Self) -> bool:
        return self.power_timer > 0

    def reset_weights(self: Self) -> None:
        self.weights = np.zeros(4, dtype=np.float64)

    def tick_power_timer(self: Self) -> None:
        if self.power_timer > 0:
            self.power_timer -= 1

    def spawn(self: Self, cell: Cell, direction: Direction = Direction.NONE) -> None:
        super().spawn(cell, direction)
        # The start square is never food, and counts as visited.
        self.stash_background(None)
        self.memory.consume(cell.row, cell.col)

    def move(self: Self, cell: Cell, direction: Direction) -> None:
        """Eat whatever is on ``cell`` and step onto it."""
        if cell is None or not cell.passable:
            log.error("Actor move into missing or blocked cell", dest=cell)
            raise ValueError(f"Actor cannot move into {cell}.")

        occupant = self.layer.entity_at(cell)
        if isinstance(occupant, Ghost):
            self.score += int(ItemKind.GHOST)
            log.debug("Actor ate ghost", cell=cell.pos, score=self.score)
            # Sending the ghost home uncovers whatever it was standing on.
            occupant.send_home()
        elif occupant is not None:
            raise ValueError(f"Actor cannot move onto {occupant!r}.")

        item = self.layer.kind_at(cell)
        self.score += int(item)
        if item is ItemKind.BISCUIT:
            self.memory.remember(cell.row, cell.col, ItemKind.BISCUIT)
        elif item is ItemKind.PILL:
            self.memory.remember(cell.row, cell.col, ItemKind.PILL)
            self.power_timer = self.pill_timer_max
            log.debug("Actor powered up", cell=cell.pos, timer=self.power_timer)

        # Whatever was eaten is gone; the square left behind is empty.
        self.stash_background(ItemKind.EMPTY)
        self.restore_background()
        self.place_at(cell, direction)
        self.layer.put_entity(cell, self)
        self.memory.consume(cell.row, cell.col)


__all__ = ["Actor"]
