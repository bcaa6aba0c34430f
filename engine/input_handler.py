# engine/input_handler.py
"""
Maps raw key strings to manual movement directions based on keybindings.
A bound key queues a one-shot override that replaces the next autonomous
decision.
"""
from typing import TYPE_CHECKING, Any
from typing import Dict as PyDict

import structlog

from pacmind.constants import Direction

if TYPE_CHECKING:
    from pacmind.game_state import GameState

log = structlog.get_logger(__name__)

DEFAULT_BINDINGS: PyDict[str, str] = {
    "up": "W",
    "down": "S",
    "left": "A",
    "right": "D",
}


class InputHandler:
    def __init__(self, keybindings_config: PyDict[str, Any] | None = None):
        self.keybindings_config: PyDict[str, Any] = keybindings_config or {}
        self.key_map: PyDict[str, Direction] = self._build_key_map()
        log.debug("InputHandler initialized.", keys=sorted(self.key_map))

    def _build_key_map(self) -> PyDict[str, Direction]:
        bindings = self.keybindings_config.get("bindings", {}).get("actor", {})
        if not isinstance(bindings, dict) or not bindings:
            bindings = DEFAULT_BINDINGS
        key_map: PyDict[str, Direction] = {}
        for direction_name, keys in bindings.items():
            try:
                direction = Direction[direction_name.upper()]
            except KeyError:
                log.warning("Unknown direction in keybindings", direction=direction_name)
                continue
            if direction is Direction.NONE:
                continue
            if isinstance(keys, str):
                keys = [keys]
            for key in keys:
                key_map[self._normalize(key)] = direction
        return key_map

    @staticmethod
    def _normalize(key: str) -> str:
        return key.strip().upper()

    def direction_for_key(self, key: str | None) -> Direction | None:
        if not key:
            return None
        return self.key_map.get(self._normalize(key))

    def handle_key(self, key: str | None, game_state: "GameState") -> bool:
        """Queue a manual direction for ``key``. Returns False for unbound keys."""
        direction = self.direction_for_key(key)
        if direction is None:
            log.debug("Unbound key ignored", key=key)
            return False
        game_state.set_manual_direction(direction)
        return True
