"""pacmind/world/scan.py

Straight-line visibility along one cardinal direction. Both helpers walk the
board's adjacency table one step at a time from the cell next to the origin
and treat blocked cells (or the grid edge) as opaque.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, NamedTuple

from pacmind.constants import TALLY_KINDS, Direction, ItemKind
from pacmind.world.board import Board, Cell

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from pacmind.entities.entity import Entity
    from pacmind.world.items import ItemLayer


class Sighting(NamedTuple):
    cell: Cell
    distance: int
    occupant: "Entity | ItemKind"


def _ray(board: Board, origin: Cell, direction: Direction) -> Iterator[Cell]:
    current = board.neighbor(origin, direction)
    while current is not None and current.passable:
        yield current
        current = board.neighbor(current, direction)


def find_first(
    board: Board,
    layer: "ItemLayer",
    origin: Cell,
    direction: Direction,
    kind: ItemKind,
) -> Sighting | None:
    """Return the nearest ``kind`` in ``direction`` before any wall, or ``None``."""
    for distance, cell in enumerate(_ray(board, origin, direction), start=1):
        if layer.kind_at(cell) == kind:
            return Sighting(cell, distance, layer.occupant(cell))
    return None


def tally_within_distance(
    board: Board,
    layer: "ItemLayer",
    origin: Cell,
    direction: Direction,
    max_distance: int,
) -> dict[ItemKind, int]:
    """Count item kinds over at most ``max_distance`` steps in ``direction``.

    The actor's own marker is tallied as empty.
    """
    counts = {kind: 0 for kind in TALLY_KINDS}
    if max_distance <= 0:
        return counts
    for distance, cell in enumerate(_ray(board, origin, direction), start=1):
        kind = layer.kind_at(cell)
        counts[kind if kind in counts else ItemKind.EMPTY] += 1
        if distance >= max_distance:
            break
    return counts


__all__ = ["Sighting", "find_first", "tally_within_distance"]
