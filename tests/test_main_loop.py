import pytest

from engine.main_loop import RESULTS_SCHEMA, MainLoop
from game_rng import GameRNG
from pacmind.constants import Direction, GameMode, ItemKind
from pacmind.world.layouts import parse_layout

SHORT_CORRIDOR = """
#####
#P.o#
#####
"""


def make_loop(memory_mode="layout", **kwargs):
    return MainLoop(
        parse_layout(SHORT_CORRIDOR),
        rng=GameRNG(seed=11),
        memory_mode=memory_mode,
        **kwargs,
    )


def test_starts_waiting():
    loop = make_loop()
    assert loop.mode is GameMode.WAITING
    assert loop.tic() is None
    assert loop.results.columns == list(RESULTS_SCHEMA)
    assert loop.results.is_empty()


def test_init_game_requires_an_iteration():
    with pytest.raises(ValueError):
        make_loop().init_game(0)


def test_session_runs_every_iteration():
    loop = make_loop()
    results = loop.run(iterations=3)

    assert loop.mode is GameMode.FINISHED
    assert results.height == 3
    assert results["iteration"].to_list() == [1, 2, 3]
    assert results["score"].to_list() == [110, 110, 110]
    assert results["ticks"].to_list() == [2, 2, 2]
    assert results["outcome"].to_list() == ["cleared"] * 3
    assert results["remaining"].to_list() == [0, 0, 0]
    assert loop.running_score == 330
    assert loop.tic() is None


def test_learned_memory_carries_to_next_iteration():
    loop = make_loop(memory_mode="empty")
    gs = loop.init_game(iterations=2)
    assert not gs.actor.known.any()

    loop.tic()
    loop.tic()

    assert loop.iteration == 2
    second = loop.game_state
    assert second is not gs
    assert second.actor.known[1, 2] == ItemKind.BISCUIT
    assert second.actor.known[1, 3] == ItemKind.PILL
    assert second.actor.working[1, 3] == ItemKind.PILL


def test_tic_passes_override_through():
    loop = make_loop()
    loop.init_game()
    result = loop.tic(Direction.RIGHT)
    assert result.manual
    assert result.direction is Direction.RIGHT


def test_reset_score_clears_results():
    loop = make_loop()
    loop.run(iterations=1)
    loop.reset_score()
    assert loop.running_score == 0
    assert loop.results.is_empty()


def test_timeout_is_recorded():
    layout = parse_layout("#######\n#P  #.#\n#######")
    loop = MainLoop(layout, rng=GameRNG(seed=3), max_ticks=5)
    results = loop.run()
    assert results.row(0, named=True) == {
        "iteration": 1,
        "score": 0,
        "ticks": 5,
        "outcome": "timeout",
        "remaining": 1,
    }


def test_from_config_reads_sections():
    config = {
        "rng_seed": 5,
        "max_ticks": 50,
        "ghost_respawn_delay": 2,
        "decision": {"view_distance": 3, "reversal_penalty": 4},
        "memory": {"mode": "empty", "preserve_lower_right_defect": True},
    }
    loop = MainLoop.from_config(config, parse_layout(SHORT_CORRIDOR))
    assert loop.rng.initial_seed == 5
    assert loop.max_ticks == 50
    assert loop.ghost_respawn_delay == 2
    assert loop.decision_config.view_distance == 3
    assert loop.decision_config.reversal_penalty == 4
    assert loop.decision_config.preserve_lower_right_defect is True
    assert not loop.memory_template.any()


def test_unknown_memory_mode_is_rejected():
    with pytest.raises(ValueError):
        make_loop(memory_mode="psychic")
