from engine.input_handler import InputHandler
from pacmind.constants import Direction


class RecordingState:
    def __init__(self):
        self.queued = []

    def set_manual_direction(self, direction):
        self.queued.append(direction)


def test_default_bindings():
    handler = InputHandler()
    assert handler.direction_for_key("w") is Direction.UP
    assert handler.direction_for_key("S") is Direction.DOWN
    assert handler.direction_for_key("a") is Direction.LEFT
    assert handler.direction_for_key("D") is Direction.RIGHT


def test_bindings_from_config_accept_lists_and_strings():
    config = {"bindings": {"actor": {"up": ["K", "Up"], "down": "J", "sideways": "X"}}}
    handler = InputHandler(config)
    assert handler.direction_for_key("k") is Direction.UP
    assert handler.direction_for_key("up") is Direction.UP
    assert handler.direction_for_key("j") is Direction.DOWN
    assert handler.direction_for_key("x") is None
    # Configured bindings replace the defaults.
    assert handler.direction_for_key("w") is None


def test_handle_key_queues_direction():
    state = RecordingState()
    handler = InputHandler()
    assert handler.handle_key("d", state)
    assert not handler.handle_key("q", state)
    assert not handler.handle_key(None, state)
    assert state.queued == [Direction.RIGHT]
