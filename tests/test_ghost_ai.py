import numpy as np
import pytest

from game_rng import GameRNG
from pacmind.ai.ghost_ai import choose_ghost_move
from pacmind.constants import Direction
from pacmind.entities.actor import Actor
from pacmind.entities.ghost import Ghost
from pacmind.world.board import Board
from pacmind.world.items import ItemLayer


class RecordingChoice:
    """Picks the first candidate and remembers what it was offered."""

    def __init__(self):
        self.offered = []

    def choice(self, seq):
        self.offered.append(list(seq))
        return seq[0]


class NoChoice:
    def choice(self, seq):
        raise AssertionError("choice should not be needed")


def open_world(rows=5, cols=5):
    board = Board(np.ones((rows, cols), dtype=bool))
    return board, ItemLayer(board)


def corridor_world():
    """Single corridor at row 1, columns 1-3."""
    passable = np.zeros((3, 5), dtype=bool)
    passable[1, 1:4] = True
    board = Board(passable)
    return board, ItemLayer(board)


def add_ghost(board, layer, pos, heading=Direction.NONE, ghost_id=0):
    ghost = Ghost(board, layer, board.cell(*pos), ghost_id=ghost_id)
    ghost.spawn(ghost.home)
    ghost.place_at(ghost.cell, heading)
    return ghost


def add_actor(board, layer, pos=None, power_timer=0):
    actor = Actor(board, layer, None, np.zeros(board.shape))
    if pos is not None:
        actor.spawn(board.cell(*pos))
    actor.power_timer = power_timer
    return actor


def test_boxed_ghost_stays_put():
    board, layer = open_world()
    ghost = Ghost(board, layer, board.cell(2, 2))
    actor = add_actor(board, layer, (0, 0))
    assert ghost.in_box
    assert choose_ghost_move(ghost, actor, board, NoChoice()) is None


def test_ghost_with_no_legal_move_stays_put():
    board, layer = corridor_world()
    ghost = add_ghost(board, layer, (1, 3), Direction.RIGHT)
    add_ghost(board, layer, (1, 2), ghost_id=1)
    actor = add_actor(board, layer)
    assert choose_ghost_move(ghost, actor, board, NoChoice()) is None


def test_chases_visible_unpowered_actor():
    board, layer = open_world()
    ghost = add_ghost(board, layer, (2, 2))
    actor = add_actor(board, layer, (2, 4))
    direction, cell = choose_ghost_move(ghost, actor, board, NoChoice())
    assert direction is Direction.RIGHT
    assert cell is board.cell(2, 3)


def test_avoids_direction_of_powered_actor():
    board, layer = open_world()
    ghost = add_ghost(board, layer, (2, 2))
    actor = add_actor(board, layer, (2, 4), power_timer=10)
    rng = RecordingChoice()

    direction, _ = choose_ghost_move(ghost, actor, board, rng)

    assert rng.offered == [[Direction.UP, Direction.DOWN, Direction.LEFT]]
    assert direction is not Direction.RIGHT


def test_cornered_ghost_may_step_towards_powered_actor():
    board, layer = corridor_world()
    ghost = add_ghost(board, layer, (1, 3), Direction.RIGHT)
    actor = add_actor(board, layer, (1, 1), power_timer=10)
    rng = RecordingChoice()

    direction, cell = choose_ghost_move(ghost, actor, board, rng)

    assert rng.offered == [[Direction.LEFT]]
    assert direction is Direction.LEFT
    assert cell is board.cell(1, 2)


def test_wandering_ghost_does_not_reverse():
    board, layer = open_world()
    ghost = add_ghost(board, layer, (2, 2), Direction.RIGHT)
    actor = add_actor(board, layer)
    rng = RecordingChoice()

    choose_ghost_move(ghost, actor, board, rng)

    assert rng.offered == [[Direction.UP, Direction.DOWN, Direction.RIGHT]]


def test_reverses_only_at_dead_end():
    board, layer = corridor_world()
    ghost = add_ghost(board, layer, (1, 3), Direction.RIGHT)
    actor = add_actor(board, layer)
    rng = RecordingChoice()

    direction, cell = choose_ghost_move(ghost, actor, board, rng)

    assert rng.offered == [[Direction.LEFT]]
    assert direction is Direction.LEFT
    assert cell is board.cell(1, 2)


def test_never_steps_onto_another_ghost():
    board, layer = open_world()
    ghost = add_ghost(board, layer, (2, 2))
    add_ghost(board, layer, (2, 3), ghost_id=1)
    actor = add_actor(board, layer)
    rng = RecordingChoice()

    choose_ghost_move(ghost, actor, board, rng)

    assert rng.offered == [[Direction.UP, Direction.DOWN, Direction.LEFT]]


@pytest.mark.parametrize("seed", range(5))
def test_wandering_choice_is_always_legal(seed):
    board, layer = open_world()
    ghost = add_ghost(board, layer, (0, 0), Direction.UP)
    actor = add_actor(board, layer)
    direction, cell = choose_ghost_move(ghost, actor, board, GameRNG(seed=seed))
    assert direction in (Direction.DOWN, Direction.RIGHT)
    assert board.neighbor(ghost.cell, direction) is cell
