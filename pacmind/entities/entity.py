# pacmind/entities/entity.py
"""Occupancy bookkeeping shared by everything that walks the item layer.

An entity remembers the single item it is standing on (its *background*) so
that leaving a cell puts that item back. The order inside :meth:`Entity.move`
matters: the old cell is restored while ``self.cell`` still points at it, and
only then is the entity relocated.
"""

from __future__ import annotations

from typing import Self

import structlog

from pacmind.constants import Direction, ItemKind
from pacmind.world.board import Board, Cell
from pacmind.world.items import ItemLayer
from pacmind.world.scan import Sighting, find_first, tally_within_distance

log = structlog.get_logger()


class OccupancyError(RuntimeError):
    """Raised when a move would put two entities on one cell."""


class Entity:
    kind: ItemKind = ItemKind.EMPTY

    def __init__(self: Self, board: Board, layer: ItemLayer, cell: Cell | None):
        self.board = board
        self.layer = layer
        self.cell: Cell | None = cell
        self.direction: Direction = Direction.NONE
        self.background: ItemKind | None = None

    def __repr__(self: Self) -> str:
        pos = None if self.cell is None else self.cell.pos
        return f"{type(self).__name__}(cell={pos}, direction={self.direction.name})"

    # --- Position ---
    def place_at(self: Self, cell: Cell | None, direction: Direction = Direction.NONE) -> None:
        """Set position and heading without touching the item layer."""
        self.cell = cell
        self.direction = direction

    # --- Background stash ---
    def stash_background(self: Self, kind: ItemKind | None) -> None:
        self.background = None if kind is None else ItemKind(kind)

    def restore_background(self: Self) -> None:
        """Write the stashed item (or EMPTY) back at the current cell and clear it."""
        if self.cell is not None:
            restored = ItemKind.EMPTY if self.background is None else self.background
            self.layer.put_kind(self.cell, restored)
        self.background = None

    # --- Movement ---
    def _check_destination(self: Self, cell: Cell | None) -> Cell:
        if cell is None or not cell.passable:
            log.error("Move into missing or blocked cell", entity=repr(self), dest=cell)
            raise ValueError(f"{type(self).__name__} cannot move into {cell}.")
        other = self.layer.entity_at(cell)
        if other is not None and other is not self:
            log.error(
                "Move into occupied cell",
                entity=repr(self),
                occupant=repr(other),
                dest=cell.pos,
            )
            raise OccupancyError(f"{cell.pos} is already occupied by {other!r}.")
        return cell

    def spawn(self: Self, cell: Cell, direction: Direction = Direction.NONE) -> None:
        """Enter the board at ``cell``, keeping whatever item was lying there."""
        cell = self._check_destination(cell)
        self.stash_background(self.layer.kind_at(cell))
        self.place_at(cell, direction)
        self.layer.put_entity(cell, self)

    def move(self: Self, cell: Cell, direction: Direction) -> None:
        cell = self._check_destination(cell)
        arriving_on = self.layer.kind_at(cell)
        self.restore_background()
        self.stash_background(arriving_on)
        self.place_at(cell, direction)
        self.layer.put_entity(cell, self)

    # --- Scanning ---
    def find_item(self: Self, direction: Direction, kind: ItemKind) -> Sighting | None:
        if self.cell is None:
            return None
        return find_first(self.board, self.layer, self.cell, direction, kind)

    def find_items(self: Self, direction: Direction, max_distance: int) -> dict[ItemKind, int]:
        if self.cell is None:
            raise RuntimeError(f"{self!r} is off the board and cannot look around.")
        return tally_within_distance(
            self.board, self.layer, self.cell, direction, max_distance
        )


__all__ = ["Entity", "OccupancyError"]
