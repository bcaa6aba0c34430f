# pacmind/game_state.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np
import structlog

from game_rng import GameRNG
from pacmind.ai.decision import DecisionConfig, compute_next_move
from pacmind.ai.ghost_ai import choose_ghost_move
from pacmind.constants import (
    CARDINALS,
    COLLECTIBLES,
    GHOST_RESPAWN_DELAY,
    Direction,
    GameMode,
)
from pacmind.entities.actor import Actor
from pacmind.entities.ghost import Ghost
from pacmind.world.board import Board
from pacmind.world.items import ItemLayer
from pacmind.world.layouts import Placements, render_layer

log = structlog.get_logger()

Outcome = Literal["cleared", "timeout", "caught"]


@dataclass(frozen=True)
class TickResult:
    tick: int
    direction: Direction
    score: int
    power_timer: int
    finished: bool
    outcome: Outcome | None
    manual: bool = False


class GameState:
    """One play-through: the board, its item layer, the actor and the ghosts.

    A tick runs in a fixed order:

    1. the actor's power-up timer counts down,
    2. boxed ghosts count down and respawn if their home is free,
    3. the actor decides (or takes a queued manual direction) and moves,
    4. ghosts move in list order,
    5. the finishing conditions are checked.

    Ghosts therefore always see the actor's post-move position, and the actor
    always scans ghosts where they ended the previous tick.
    """

    def __init__(
        self,
        board: Board,
        layer: ItemLayer,
        actor: Actor,
        ghosts: list[Ghost],
        rng: GameRNG,
        decision_config: DecisionConfig,
        max_ticks: int | None = None,
    ):
        self.board = board
        self.layer = layer
        self.actor = actor
        self.ghosts = ghosts
        self.rng = rng
        self.decision_config = decision_config
        self.max_ticks = max_ticks
        self.tick_count: int = 0
        self.mode: GameMode = GameMode.PLAYING
        self.outcome: Outcome | None = None
        self._manual_direction: Direction | None = None
        self._tick_in_flight: bool = False

    # --- Construction ---
    @classmethod
    def initialize(
        cls,
        board: Board,
        placements: Placements,
        memory_layout: np.ndarray,
        decision_config: DecisionConfig | None = None,
        rng: GameRNG | None = None,
        ghost_respawn_delay: int = GHOST_RESPAWN_DELAY,
        max_ticks: int | None = None,
    ) -> "GameState":
        """Build a fresh play-through from board geometry and start positions."""
        if board.rows < 3 or board.cols < 3:
            log.error("Board too small", shape=board.shape)
            raise ValueError(f"Board {board.shape} is smaller than 3x3.")
        memory_layout = np.asarray(memory_layout)
        if memory_layout.shape != board.shape:
            log.error(
                "Memory layout shape mismatch",
                memory=memory_layout.shape,
                board=board.shape,
            )
            raise ValueError("Memory layout must share the board's shape.")

        decision_config = decision_config or DecisionConfig()
        rng = rng or GameRNG()
        layer = ItemLayer(board, placements.items)

        start = board.cell(*placements.actor)
        if not start.passable:
            raise ValueError(f"Actor start {start.pos} is a blocked cell.")
        start_kind = layer.kind_at(start)
        if start_kind in COLLECTIBLES:
            log.error("Collectible under actor start", cell=start.pos, kind=start_kind.name)
            raise ValueError(
                f"Actor start {start.pos} holds {start_kind.name}; it must be empty."
            )
        actor = Actor(
            board,
            layer,
            None,
            memory_layout,
            pill_timer_max=decision_config.pill_timer_max,
        )
        actor.spawn(start)

        ghosts: list[Ghost] = []
        for ghost_id, pos in enumerate(placements.ghosts):
            ghost = Ghost(
                board,
                layer,
                board.cell(*pos),
                respawn_delay=ghost_respawn_delay,
                ghost_id=ghost_id,
            )
            ghost.spawn(ghost.home)
            ghosts.append(ghost)

        gs = cls(board, layer, actor, ghosts, rng, decision_config, max_ticks)
        log.info(
            "Play-through initialized",
            board=board.shape,
            actor=start.pos,
            ghosts=len(ghosts),
            collectibles=layer.remaining_collectibles(),
            rng_seed=rng.initial_seed,
        )
        return gs

    # --- Manual override ---
    def set_manual_direction(self, direction: Direction | None) -> None:
        """Queue a direction that replaces the next autonomous decision."""
        if direction is Direction.NONE:
            direction = None
        self._manual_direction = direction
        log.debug(
            "Manual direction queued",
            direction=None if direction is None else direction.name,
        )

    @property
    def finished(self) -> bool:
        return self.mode is GameMode.FINISHED

    # --- Tick ---
    def advance_one_tick(self, override: Direction | None = None) -> TickResult:
        if self._tick_in_flight:
            raise RuntimeError("advance_one_tick called while a tick is in flight.")
        if self.finished:
            raise RuntimeError("Play-through already finished.")
        self._tick_in_flight = True
        try:
            return self._run_tick(override)
        finally:
            self._tick_in_flight = False

    def _run_tick(self, override: Direction | None) -> TickResult:
        self.tick_count += 1
        actor = self.actor
        actor.tick_power_timer()
        for ghost in self.ghosts:
            ghost.tick_respawn()

        direction, manual = self._actor_turn(override)
        self._ghost_turns()
        self._check_finished()

        log.debug(
            "Tick complete",
            tick=self.tick_count,
            direction=direction.name,
            score=actor.score,
            power_timer=actor.power_timer,
        )
        return TickResult(
            tick=self.tick_count,
            direction=direction,
            score=actor.score,
            power_timer=actor.power_timer,
            finished=self.finished,
            outcome=self.outcome,
            manual=manual,
        )

    def _actor_turn(self, override: Direction | None) -> tuple[Direction, bool]:
        actor = self.actor
        requested = override if override is not None else self._manual_direction
        self._manual_direction = None

        if requested is not None and requested in CARDINALS:
            target = self.board.neighbor(actor.cell, requested)
            if target is not None:
                actor.move(target, requested)
                return requested, True
            log.warning(
                "Manual direction blocked, falling back to decision engine",
                direction=requested.name,
                cell=actor.cell.pos,
            )

        move = compute_next_move(actor, self.board, self.rng, self.decision_config)
        actor.move(move.cell, move.direction)
        return move.direction, False

    def _ghost_turns(self) -> None:
        actor = self.actor
        for ghost in self.ghosts:
            choice = choose_ghost_move(ghost, actor, self.board, self.rng)
            if choice is None:
                continue
            direction, target = choice
            if self.layer.entity_at(target) is actor:
                if actor.is_powered_up:
                    actor.score += int(ghost.kind)
                    log.debug("Ghost ran into powered actor", ghost_id=ghost.ghost_id)
                    ghost.send_home()
                    continue
                self._finish("caught")
                return
            ghost.move(target, direction)

    def _check_finished(self) -> None:
        if self.finished:
            return
        if self.layer.remaining_collectibles() == 0:
            self._finish("cleared")
        elif self.max_ticks is not None and self.tick_count >= self.max_ticks:
            self._finish("timeout")

    def _finish(self, outcome: Outcome) -> None:
        self.mode = GameMode.FINISHED
        self.outcome = outcome
        log.info(
            "Play-through finished",
            outcome=outcome,
            ticks=self.tick_count,
            score=self.actor.score,
        )

    # --- Outbound views ---
    def render_text(self) -> str:
        return render_layer(self.layer.kinds, self.board.passable)


__all__ = ["GameState", "TickResult"]
