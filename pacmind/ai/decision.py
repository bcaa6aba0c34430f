"""Per-tick move selection for the actor.

Each direction is scored from what the actor can see along it, weighted by
item kind, then nudged towards the densest quadrant of working memory and away
from reversing. The highest score wins; exact ties are settled by sequential
coin flips.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import TYPE_CHECKING, Any, Dict, NamedTuple

import numpy as np
import structlog

from pacmind.constants import (
    CARDINALS,
    MAX_VIEW_DISTANCE,
    PILL_TIMER_MAX,
    POWER_THRESHOLD,
    QUADRANT_BIAS,
    REVERSAL_PENALTY,
    Direction,
    ItemKind,
)
from pacmind.world.board import Board, Cell

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from game_rng import GameRNG
    from pacmind.entities.actor import Actor

log = structlog.get_logger()

# Incumbent score before any direction is examined.
MIN_WEIGHT: int = int(np.iinfo(np.int64).min)


@dataclass(frozen=True)
class DecisionConfig:
    view_distance: int = MAX_VIEW_DISTANCE
    power_threshold: int = POWER_THRESHOLD
    reversal_penalty: int = REVERSAL_PENALTY
    quadrant_bias: int = QUADRANT_BIAS
    pill_timer_max: int = PILL_TIMER_MAX
    preserve_lower_right_defect: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "DecisionConfig":
        data = data or {}
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            log.warning("Ignoring unknown decision settings", keys=sorted(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})


class Move(NamedTuple):
    direction: Direction
    cell: Cell
    weights: np.ndarray


def item_weight(kind: ItemKind, power_timer: int, threshold: int = POWER_THRESHOLD) -> int:
    """Desirability of one sighted item, depending on the power-up timer."""
    powered = power_timer > threshold
    if kind is ItemKind.BISCUIT:
        return 1
    if kind is ItemKind.PILL:
        # Save pills for later while the current one still has a few ticks left.
        return -1 if powered else 10
    if kind is ItemKind.GHOST:
        return 20 if powered else -20
    return 0


def weight_in_direction(actor: "Actor", direction: Direction, config: DecisionConfig) -> int:
    counts = actor.find_items(direction, config.view_distance)
    return sum(
        item_weight(kind, actor.power_timer, config.power_threshold) * count
        for kind, count in counts.items()
    )


def choose_best_direction(weights: np.ndarray, rng: "GameRNG") -> Direction:
    """Pick the max-weight direction, flipping a coin on each exact tie.

    Directions are examined in ``CARDINALS`` order and a tying challenger
    replaces the incumbent on heads. With three or more ties this does not
    give a uniform choice, and that bias is kept on purpose.
    """
    best_dir = Direction.NONE
    best_weight: float = MIN_WEIGHT
    for direction in CARDINALS:
        weight = float(weights[direction])
        if weight > best_weight:
            best_weight = weight
            best_dir = direction
        elif weight == best_weight:
            if rng.coin_flip() == "heads":
                best_weight = weight
                best_dir = direction
    return best_dir


def compute_next_move(
    actor: "Actor",
    board: Board,
    rng: "GameRNG",
    config: DecisionConfig | None = None,
) -> Move:
    config = config or DecisionConfig()
    if actor.cell is None:
        raise RuntimeError("Actor is not on the board.")

    actor.reset_weights()
    weights = actor.weights
    opposite = actor.direction.opposite

    for direction in CARDINALS:
        if direction is opposite:
            continue
        if board.neighbor(actor.cell, direction) is None:
            weights[direction] = -np.inf
        else:
            weights[direction] += weight_in_direction(actor, direction, config)

    weights += actor.memory.density_bias(
        config.quadrant_bias, config.preserve_lower_right_defect
    )

    if opposite is not Direction.NONE:
        weights[opposite] -= config.reversal_penalty

    best = choose_best_direction(weights, rng)
    target = board.neighbor(actor.cell, best)
    if target is None:
        log.error(
            "Decision produced no legal move",
            cell=actor.cell.pos,
            direction=best.name,
            weights=weights.tolist(),
        )
        raise RuntimeError(f"No legal move from {actor.cell.pos} (chose {best.name}).")

    log.debug(
        "Actor decision",
        cell=actor.cell.pos,
        direction=best.name,
        weights=weights.tolist(),
    )
    return Move(best, target, weights.copy())


__all__ = [
    "DecisionConfig",
    "Move",
    "MIN_WEIGHT",
    "item_weight",
    "weight_in_direction",
    "choose_best_direction",
    "compute_next_move",
]
