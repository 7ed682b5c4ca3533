"""Game service module.

Provides:
- Game initialization (start_game.py)
- Board construction (board_layout.py)
- Game engine processing (engine/)
"""

# Re-export from engine for convenience
from .board_layout import build_board, standard_tiles
from .engine import (
    ActionRequest,
    ActionType,
    ProcessResult,
    apply_events,
    build_request_from_payload,
    process_action,
    start,
)
from .start_game import initialize_game, validate_game_settings

__all__ = [
    # Initialization
    "initialize_game",
    "validate_game_settings",
    "build_board",
    "standard_tiles",
    # Engine
    "ActionRequest",
    "ActionType",
    "ProcessResult",
    "process_action",
    "build_request_from_payload",
    "apply_events",
    "start",
]
