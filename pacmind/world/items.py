# pacmind/world/items.py
"""Item layer: what occupies each board cell right now.

Plain items (biscuits, pills, empty squares) live in a dense ``int16`` grid of
:class:`~pacmind.constants.ItemKind` codes. Entities are mirrored into that
grid by kind and additionally tracked in an occupancy map so the layer can
hand back the entity standing on a cell.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import structlog

from pacmind.constants import COLLECTIBLES, ENTITY_KINDS, ItemKind
from pacmind.world.board import Board, Cell

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from pacmind.entities.entity import Entity

log = structlog.get_logger()


class ItemLayer:
    def __init__(self, board: Board, kinds: np.ndarray | None = None):
        self.board = board
        if kinds is None:
            kinds = np.zeros(board.shape, dtype=np.int16)
        kinds = np.asarray(kinds, dtype=np.int16)
        if kinds.shape != board.shape:
            log.error(
                "Item grid shape mismatch", kinds=kinds.shape, board=board.shape
            )
            raise ValueError("Item grid must share the board's shape.")
        if np.any(np.isin(kinds, [int(k) for k in ENTITY_KINDS])):
            raise ValueError("Entities must be placed through put_entity, not the grid.")
        if np.any(kinds[~board.passable] != ItemKind.EMPTY):
            raise ValueError("Blocked cells cannot hold items.")
        self.kinds: np.ndarray = kinds.copy(order="C")
        self._entities: dict[tuple[int, int], Entity] = {}

    # --- Reads ---
    def kind_at(self, cell: Cell) -> ItemKind:
        return ItemKind(int(self.kinds[cell.row, cell.col]))

    def entity_at(self, cell: Cell) -> "Entity | None":
        return self._entities.get(cell.pos)

    def occupant(self, cell: Cell) -> "Entity | ItemKind":
        """Return the entity on ``cell`` if any, else the plain item kind."""
        entity = self._entities.get(cell.pos)
        return entity if entity is not None else self.kind_at(cell)

    def entities(self) -> list["Entity"]:
        return list(self._entities.values())

    # --- Writes ---
    def put_kind(self, cell: Cell, kind: ItemKind) -> None:
        """Write a plain item onto ``cell``, evicting any entity record there."""
        kind = ItemKind(kind)
        if kind in ENTITY_KINDS:
            raise ValueError(f"{kind.name} must be written with put_entity.")
        if not cell.passable and kind is not ItemKind.EMPTY:
            log.error("Item written to blocked cell", cell=cell.pos, kind=kind.name)
            raise ValueError(f"Blocked cell {cell.pos} cannot hold {kind.name}.")
        self._entities.pop(cell.pos, None)
        self.kinds[cell.row, cell.col] = kind

    def put_entity(self, cell: Cell, entity: "Entity") -> None:
        if not cell.passable:
            log.error("Entity written to blocked cell", cell=cell.pos)
            raise ValueError(f"Blocked cell {cell.pos} cannot hold an entity.")
        self._entities[cell.pos] = entity
        self.kinds[cell.row, cell.col] = entity.kind

    # --- Queries ---
    def remaining_collectibles(self) -> int:
        """Biscuits and pills still on the board, including any a ghost is covering."""
        on_grid = int(np.count_nonzero(np.isin(self.kinds, [int(k) for k in COLLECTIBLES])))
        hidden = sum(
            1
            for entity in self._entities.values()
            if entity.background in COLLECTIBLES
        )
        return on_grid + hidden

    def check_invariants(self) -> None:
        """Raise ``ValueError`` if the layer's occupancy rules are broken."""
        if np.any(self.kinds[~self.board.passable] != ItemKind.EMPTY):
            raise ValueError("Blocked cell holds an item.")
        for (row, col), entity in self._entities.items():
            if entity.cell is None or entity.cell.pos != (row, col):
                raise ValueError(
                    f"Entity registered at {(row, col)} believes it is at "
                    f"{None if entity.cell is None else entity.cell.pos}."
                )
            if self.kinds[row, col] != entity.kind:
                raise ValueError(f"Kind grid disagrees with entity at {(row, col)}.")
        registered = set(self._entities)
        for kind in ENTITY_KINDS:
            for row, col in np.argwhere(self.kinds == kind):
                if (int(row), int(col)) not in registered:
                    raise ValueError(f"Orphan {kind.name} marker at {(int(row), int(col))}.")


__all__ = ["ItemLayer"]
