"""Game engine module - pure functional action processing.

This module provides the core game engine with:
- Action request types for player inputs
- Event types describing committed changes
- An action registry routing requests to ordered rule chains
- ProcessResult pattern for error handling

Usage:
    from settlers.services.game.engine import (
        apply_events,
        build_request_from_payload,
        process_action,
    )

    request = build_request_from_payload(
        {"playerId": player_id, "type": "build-road", "data": {"buildId": 12}}
    )
    result = process_action(game, request)

    if result.success:
        game = apply_events(game, result.events)
        messages = [event.to_message() for event in result.events]
    else:
        print(f"Error: {result.error_code} - {result.error_message}")
"""

# Actions - player inputs
from .actions import ActionRequest, ActionType, BuildData, build_request_from_payload

# Context and chain execution
from .context import DiceRoller, RequestContext, create_context

# Events - committed changes
from .events import (
    AnyGameEvent,
    BuildCity,
    BuildRoad,
    BuildSettlement,
    DiceRoll,
    DistributeResources,
    EndTurn,
    GameEvent,
    StartTurn,
    TradeOffer,
)
from .pipeline import ActionRegistry, Route, Step, any_phase, in_phase, run_chain

# Legal placement
from .placement import get_buildable_corners_for_player, get_buildable_edges_for_player

# Main processing
from .process import create_default_registry, get_default_registry, process_action
from .replay import apply_events
from .turns import get_data_for_turn, resources_for_roll, start

# Result types
from .validation import ProcessResult, RejectionCode, StepResult

__all__ = [
    # Actions
    "ActionRequest",
    "ActionType",
    "BuildData",
    "build_request_from_payload",
    # Events
    "GameEvent",
    "AnyGameEvent",
    "BuildRoad",
    "BuildSettlement",
    "BuildCity",
    "TradeOffer",
    "StartTurn",
    "EndTurn",
    "DiceRoll",
    "DistributeResources",
    # Pipeline
    "ActionRegistry",
    "Route",
    "Step",
    "any_phase",
    "in_phase",
    "run_chain",
    "DiceRoller",
    "RequestContext",
    "create_context",
    # Processing
    "create_default_registry",
    "get_default_registry",
    "process_action",
    "apply_events",
    "start",
    "get_data_for_turn",
    "resources_for_roll",
    # Placement
    "get_buildable_edges_for_player",
    "get_buildable_corners_for_player",
    # Validation
    "ProcessResult",
    "RejectionCode",
    "StepResult",
]
