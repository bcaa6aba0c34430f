# main.py
import sys
import time
from pathlib import Path

import structlog

from engine.input_handler import InputHandler
from engine.main_loop import MainLoop
from pacmind.constants import GameMode
from pacmind.world.layouts import parse_layout
from utils.config import load_toml_config, load_yaml_config
from utils.logging_utils import setup_logging

# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"

CONFIG_FILE = CONFIG_DIR / "config.yaml"
KEYBINDINGS_FILE = CONFIG_DIR / "keybindings.toml"
# --- End Paths ---

log = structlog.get_logger()


def print_status(main_loop: MainLoop) -> None:
    """Print the current board with score and power-up state."""
    gs = main_loop.game_state
    if gs is None:
        return
    print(
        f"\n--- Iteration {main_loop.iteration}/{main_loop.iterations} "
        f"tick {gs.tick_count} score {gs.actor.score} "
        f"power {gs.actor.power_timer} total {main_loop.running_score} ---"
    )
    print(gs.render_text())


def main() -> None:
    """Headless entry point: load config, run a session, print the results."""
    try:
        config = load_yaml_config(CONFIG_FILE, "Main")
        setup_logging(config.get("log_level", "INFO"))
        keybindings_config = load_toml_config(KEYBINDINGS_FILE, "Keybindings")
        layout = parse_layout(config["layout"])
        main_loop = MainLoop.from_config(config, layout)
        log.info(
            "Configurations loaded",
            board=layout.shape,
            keybindings=len(keybindings_config.get("bindings", {})),
        )
    except FileNotFoundError as e:
        log.critical("Required file not found during init", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: File not found - {e}")
    except KeyError as e:
        log.critical("Missing required key, possibly in config", key=str(e), exc_info=True)
        sys.exit(f"Configuration failed: Missing key {e}")
    except ValueError as e:
        log.critical("Invalid configuration", error=str(e), exc_info=True)
        sys.exit(f"Initialization failed: {e}")

    iterations: int = config.get("iterations", 1)
    tick_interval = config.get("tick_interval_ms", 0) / 1000.0
    print_every: int = config.get("print_every", 0)

    # Keys replayed one per tick as manual overrides before autonomy takes over.
    input_handler = InputHandler(keybindings_config)
    input_script: str = config.get("input_script", "") or ""

    main_loop.init_game(iterations)
    print_status(main_loop)
    for key in input_script:
        if main_loop.mode is not GameMode.PLAYING:
            break
        input_handler.handle_key(key, main_loop.game_state)
        main_loop.tic()
    while main_loop.mode is GameMode.PLAYING:
        result = main_loop.tic()
        if result is not None and print_every and result.tick % print_every == 0:
            print_status(main_loop)
        if tick_interval:
            time.sleep(tick_interval)

    print(main_loop.results)
    log.info("Session complete", running_score=main_loop.running_score)


if __name__ == "__main__":
    main()
