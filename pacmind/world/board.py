# pacmind/world/board.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import numpy as np
import structlog

from pacmind.constants import CARDINALS, Direction

log = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class Cell:
    """A single board square. Identity is ``(row, col)``."""

    row: int
    col: int
    passable: bool

    @property
    def pos(self) -> tuple[int, int]:
        return self.row, self.col


class Board:
    """Grid of cells with a precomputed cardinal adjacency table.

    Moving from a passable cell yields either another passable cell or
    ``None``; blocked cells stay addressable but have no neighbours.
    """

    def __init__(self, passable: np.ndarray):
        passable = np.asarray(passable, dtype=bool)
        if passable.ndim != 2 or passable.size == 0:
            log.error("Invalid board passability grid", shape=passable.shape)
            raise ValueError("Board requires a non-empty 2-D passability grid.")
        self.passable: np.ndarray = passable.copy(order="C")
        self.passable.setflags(write=False)
        self._rows, self._cols = passable.shape

        self._cells: list[list[Cell]] = [
            [Cell(r, c, bool(passable[r, c])) for c in range(self._cols)]
            for r in range(self._rows)
        ]
        self._neighbors: dict[tuple[int, int], tuple[Cell | None, ...]] = {}
        for row in self._cells:
            for cell in row:
                self._neighbors[cell.pos] = self._link(cell)

        log.debug(
            "Board built",
            shape=self.shape,
            passable=int(np.count_nonzero(self.passable)),
        )

    def _link(self, cell: Cell) -> tuple[Cell | None, ...]:
        if not cell.passable:
            return (None, None, None, None)
        links: list[Cell | None] = []
        for direction in CARDINALS:
            dr, dc = direction.delta
            r, c = cell.row + dr, cell.col + dc
            if self.in_bounds(r, c) and self.passable[r, c]:
                links.append(self._cells[r][c])
            else:
                links.append(None)
        return tuple(links)

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return self._rows, self._cols

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside a {self.shape} board.")
        return self._cells[row][col]

    def neighbor(self, cell: Cell, direction: Direction) -> Cell | None:
        """Return the adjacent passable cell in ``direction`` or ``None``."""
        if direction is Direction.NONE:
            return None
        return self._neighbors[cell.pos][direction]

    def moves(self, cell: Cell) -> dict[Direction, Cell]:
        """Legal moves out of ``cell`` keyed by direction."""
        return {
            d: n for d in CARDINALS if (n := self._neighbors[cell.pos][d]) is not None
        }

    def passable_cells(self) -> Iterator[Cell]:
        for row in self._cells:
            for cell in row:
                if cell.passable:
                    yield cell


__all__ = ["Board", "Cell"]
