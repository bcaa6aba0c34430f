import numpy as np
import pytest

from pacmind.constants import Direction, ItemKind
from pacmind.entities.actor import Actor
from pacmind.entities.ghost import Ghost
from pacmind.world.board import Board
from pacmind.world.items import ItemLayer


@pytest.fixture
def world():
    board = Board(np.ones((5, 5), dtype=bool))
    layer = ItemLayer(board)
    actor = Actor(board, layer, None, np.zeros((5, 5)))
    actor.spawn(board.cell(2, 2))
    return board, layer, actor


def test_spawn_marks_start_visited_and_leaves_nothing_behind(world):
    board, layer, actor = world
    assert layer.kind_at(board.cell(2, 2)) is ItemKind.ACTOR
    assert actor.background is None
    actor.move(board.cell(2, 3), Direction.RIGHT)
    assert layer.kind_at(board.cell(2, 2)) is ItemKind.EMPTY


def test_memory_shape_must_match_board():
    board = Board(np.ones((5, 5), dtype=bool))
    with pytest.raises(ValueError):
        Actor(board, ItemLayer(board), None, np.zeros((4, 5)))


def test_eating_biscuit_scores_and_is_remembered(world):
    board, layer, actor = world
    target = board.cell(2, 3)
    layer.put_kind(target, ItemKind.BISCUIT)

    actor.move(target, Direction.RIGHT)

    assert actor.score == 10
    assert actor.known[2, 3] == ItemKind.BISCUIT
    assert actor.working[2, 3] == 0
    assert actor.cell is target
    assert actor.direction is Direction.RIGHT
    assert actor.power_timer == 0


def test_eating_pill_powers_up(world):
    board, layer, actor = world
    target = board.cell(1, 2)
    layer.put_kind(target, ItemKind.PILL)

    actor.move(target, Direction.UP)

    assert actor.power_timer == 30
    assert actor.is_powered_up
    assert actor.score == 100
    assert actor.known[1, 2] == ItemKind.PILL
    assert actor.working[1, 2] == 0
    assert layer.kind_at(board.cell(2, 2)) is ItemKind.EMPTY
    assert layer.remaining_collectibles() == 0


def test_custom_pill_timer():
    board = Board(np.ones((3, 3), dtype=bool))
    layer = ItemLayer(board)
    layer.put_kind(board.cell(0, 1), ItemKind.PILL)
    actor = Actor(board, layer, None, np.zeros((3, 3)), pill_timer_max=7)
    actor.spawn(board.cell(1, 1))
    actor.move(board.cell(0, 1), Direction.UP)
    assert actor.power_timer == 7


def test_power_timer_counts_down_to_zero(world):
    _, _, actor = world
    actor.power_timer = 2
    actor.tick_power_timer()
    actor.tick_power_timer()
    actor.tick_power_timer()
    assert actor.power_timer == 0
    assert not actor.is_powered_up


def test_empty_square_is_consumed_but_not_remembered(world):
    board, _, actor = world
    actor.working[2, 1] = 10
    actor.move(board.cell(2, 1), Direction.LEFT)
    assert actor.score == 0
    assert actor.known[2, 1] == 0
    assert actor.working[2, 1] == 0


def test_eating_ghost_sends_it_home_and_uncovers_item(world):
    board, layer, actor = world
    ghost = Ghost(board, layer, board.cell(0, 0), respawn_delay=4)
    ghost.spawn(ghost.home)
    ghost.move(board.cell(0, 1), Direction.RIGHT)
    layer.put_kind(board.cell(1, 1), ItemKind.BISCUIT)
    ghost.move(board.cell(1, 1), Direction.DOWN)
    assert ghost.background is ItemKind.BISCUIT
    actor.power_timer = 10

    actor.move(board.cell(2, 1), Direction.LEFT)
    actor.move(board.cell(1, 1), Direction.UP)

    assert ghost.in_box
    assert ghost.respawn_timer == 4
    assert actor.score == 200 + 10
    assert layer.entity_at(board.cell(1, 1)) is actor
    assert layer.remaining_collectibles() == 0


def test_cannot_move_into_wall():
    passable = np.ones((3, 3), dtype=bool)
    passable[0, 1] = False
    board = Board(passable)
    layer = ItemLayer(board)
    actor = Actor(board, layer, None, np.zeros((3, 3)))
    actor.spawn(board.cell(1, 1))
    with pytest.raises(ValueError):
        actor.move(board.cell(0, 1), Direction.UP)
    with pytest.raises(ValueError):
        actor.move(None, Direction.UP)


def test_reset_weights(world):
    _, _, actor = world
    actor.weights[2] = 5
    actor.reset_weights()
    assert np.array_equal(actor.weights, np.zeros(4))
