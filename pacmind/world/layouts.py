"""Text maze layouts.

A layout is a block of equal-width lines::

    #########
    #P..o...#
    #.##.##.#
    #...G...#
    #########

``#`` is a wall, ``.`` a biscuit, ``o`` a pill, ``P`` the actor's start,
``G`` a ghost home and a space an empty floor square.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

import numpy as np
import structlog

from pacmind.constants import COLLECTIBLES, ItemKind

log = structlog.get_logger()

WALL: Final[str] = "#"
GLYPH_KINDS: Final[dict[str, ItemKind]] = {
    " ": ItemKind.EMPTY,
    ".": ItemKind.BISCUIT,
    "o": ItemKind.PILL,
    "P": ItemKind.EMPTY,
    "G": ItemKind.EMPTY,
}
KIND_GLYPHS: Final[dict[ItemKind, str]] = {
    ItemKind.EMPTY: " ",
    ItemKind.BISCUIT: ".",
    ItemKind.PILL: "o",
    ItemKind.ACTOR: "P",
    ItemKind.GHOST: "G",
}


@dataclass
class Placements:
    """Where things start: the actor, each ghost home, and the item grid."""

    actor: tuple[int, int]
    ghosts: list[tuple[int, int]] = field(default_factory=list)
    items: np.ndarray | None = None


@dataclass
class Layout:
    passable: np.ndarray
    placements: Placements

    @property
    def shape(self) -> tuple[int, int]:
        return self.passable.shape

    def memory_template(self, mode: str = "layout") -> np.ndarray:
        """Starting known-layout memory.

        ``"layout"`` seeds memory with every collectible's code; ``"empty"``
        starts with nothing known so the actor learns the board by eating.
        """
        if mode == "empty":
            return np.zeros(self.shape, dtype=np.int32)
        if mode != "layout":
            raise ValueError(f"Unknown memory mode: {mode!r}")
        items = self.placements.items
        template = np.zeros(self.shape, dtype=np.int32)
        if items is not None:
            mask = np.isin(items, [int(k) for k in COLLECTIBLES])
            template[mask] = items[mask]
        return template


def parse_layout(text: str) -> Layout:
    lines = [line.rstrip("\n") for line in text.strip("\n").splitlines()]
    if not lines:
        raise ValueError("Layout is empty.")
    width = max(len(line) for line in lines)
    # Ragged rows are closed off with wall so no floor appears outside the maze.
    lines = [line.ljust(width, WALL) for line in lines]

    rows = len(lines)
    passable = np.zeros((rows, width), dtype=bool)
    items = np.zeros((rows, width), dtype=np.int16)
    actor: tuple[int, int] | None = None
    ghosts: list[tuple[int, int]] = []

    for r, line in enumerate(lines):
        for c, ch in enumerate(line):
            if ch == WALL:
                continue
            if ch not in GLYPH_KINDS:
                log.error("Unknown layout glyph", glyph=ch, pos=(r, c))
                raise ValueError(f"Unknown layout glyph {ch!r} at {(r, c)}.")
            passable[r, c] = True
            items[r, c] = GLYPH_KINDS[ch]
            if ch == "P":
                if actor is not None:
                    raise ValueError("Layout has more than one actor start.")
                actor = (r, c)
            elif ch == "G":
                ghosts.append((r, c))

    if actor is None:
        raise ValueError("Layout has no actor start ('P').")
    log.debug("Layout parsed", shape=(rows, width), ghosts=len(ghosts))
    return Layout(passable, Placements(actor=actor, ghosts=ghosts, items=items))


def render_layer(kinds: np.ndarray, passable: np.ndarray) -> str:
    """Text snapshot of an item-kind grid."""
    out = []
    for r in range(kinds.shape[0]):
        out.append(
            "".join(
                KIND_GLYPHS.get(ItemKind(int(kinds[r, c])), "?") if passable[r, c] else WALL
                for c in range(kinds.shape[1])
            )
        )
    return "\n".join(out)


__all__ = ["Layout", "Placements", "parse_layout", "render_layer"]
