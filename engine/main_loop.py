# engine/main_loop.py
from typing import Any, Dict, Self

import time

import polars as pl
import structlog

from game_rng import GameRNG
from pacmind.ai.decision import DecisionConfig
from pacmind.constants import GHOST_RESPAWN_DELAY, Direction, GameMode
from pacmind.game_state import GameState, TickResult
from pacmind.world.board import Board
from pacmind.world.layouts import Layout

log = structlog.get_logger()

RESULTS_SCHEMA: dict[str, pl.DataType] = {
    "iteration": pl.UInt32,
    "score": pl.Int64,
    "ticks": pl.UInt32,
    "outcome": pl.Utf8,
    "remaining": pl.UInt32,
}


class MainLoop:
    """
    Drives play-throughs one tick at a time and keeps session totals.

    A session runs ``iterations`` play-throughs back to back. The actor's
    known-layout memory at the end of one play-through becomes the memory
    template of the next, so later iterations start better informed.
    """

    def __init__(
        self: Self,
        layout: Layout,
        decision_config: DecisionConfig | None = None,
        rng: GameRNG | None = None,
        memory_mode: str = "layout",
        ghost_respawn_delay: int = GHOST_RESPAWN_DELAY,
        max_ticks: int | None = 1000,
    ):
        self.layout = layout
        self.board = Board(layout.passable)
        self.decision_config = decision_config or DecisionConfig()
        self.rng = rng or GameRNG()
        self.ghost_respawn_delay = ghost_respawn_delay
        self.max_ticks = max_ticks

        self.memory_template = layout.memory_template(memory_mode)
        self.game_state: GameState | None = None
        self.mode: GameMode = GameMode.WAITING
        self.iteration: int = 0
        self.iterations: int = 0
        self.running_score: int = 0
        self.results: pl.DataFrame = pl.DataFrame(schema=RESULTS_SCHEMA)
        log.info(
            "MainLoop initialized",
            board=self.board.shape,
            memory_mode=memory_mode,
            max_ticks=max_ticks,
        )

    @classmethod
    def from_config(cls, config: Dict[str, Any], layout: Layout) -> "MainLoop":
        memory_cfg = config.get("memory", {})
        decision_cfg = dict(config.get("decision", {}))
        if "preserve_lower_right_defect" in memory_cfg:
            decision_cfg.setdefault(
                "preserve_lower_right_defect", memory_cfg["preserve_lower_right_defect"]
            )
        return cls(
            layout=layout,
            decision_config=DecisionConfig.from_dict(decision_cfg),
            rng=GameRNG(seed=config.get("rng_seed")),
            memory_mode=memory_cfg.get("mode", "layout"),
            ghost_respawn_delay=config.get("ghost_respawn_delay", GHOST_RESPAWN_DELAY),
            max_ticks=config.get("max_ticks", 1000),
        )

    # --- Session control ---
    def init_game(self: Self, iterations: int = 1) -> GameState:
        """Start a new session of ``iterations`` play-throughs."""
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        self.iterations = iterations
        self.iteration = 0
        log.info("Session starting", iterations=iterations)
        return self._start_episode()

    def reset_score(self: Self) -> None:
        self.running_score = 0
        self.results = pl.DataFrame(schema=RESULTS_SCHEMA)
        log.debug("Running score reset")

    def _start_episode(self: Self) -> GameState:
        self.iteration += 1
        self.game_state = GameState.initialize(
            self.board,
            self.layout.placements,
            self.memory_template,
            decision_config=self.decision_config,
            rng=self.rng,
            ghost_respawn_delay=self.ghost_respawn_delay,
            max_ticks=self.max_ticks,
        )
        self.mode = GameMode.PLAYING
        log.info("Episode started", iteration=self.iteration, of=self.iterations)
        return self.game_state

    def _end_episode(self: Self) -> None:
        gs = self.game_state
        assert gs is not None
        self.running_score += gs.actor.score
        row = pl.DataFrame(
            [
                {
                    "iteration": self.iteration,
                    "score": gs.actor.score,
                    "ticks": gs.tick_count,
                    "outcome": gs.outcome,
                    "remaining": gs.layer.remaining_collectibles(),
                }
            ],
            schema=RESULTS_SCHEMA,
        )
        self.results = pl.concat([self.results, row], how="vertical")
        # Carry what the actor learned into the next play-through.
        self.memory_template = gs.actor.known.copy()
        log.info(
            "Episode recorded",
            iteration=self.iteration,
            score=gs.actor.score,
            running_score=self.running_score,
            outcome=gs.outcome,
        )
        if self.iteration >= self.iterations:
            self.mode = GameMode.FINISHED
            log.info("Session finished", running_score=self.running_score)
        else:
            self._start_episode()

    def tic(self: Self, override: Direction | None = None) -> TickResult | None:
        """Advance the current play-through by one tick, rolling over episodes."""
        if self.mode is not GameMode.PLAYING or self.game_state is None:
            log.debug("Tick ignored", mode=self.mode.name)
            return None
        result = self.game_state.advance_one_tick(override)
        if result.finished:
            self._end_episode()
        return result

    def run(self: Self, iterations: int = 1, tick_interval: float | None = None) -> pl.DataFrame:
        """Run a whole session synchronously and return the results table.

        Each tick completes before the next is issued; ``tick_interval``
        (seconds) only paces the loop.
        """
        self.init_game(iterations)
        while self.mode is GameMode.PLAYING:
            self.tic()
            if tick_interval:
                time.sleep(tick_interval)
        return self.results
