"""Main entry point for game action processing.

This module provides the primary interface for processing game actions:
- create_default_registry(): the route table for every action type
- process_action(): validates and runs one action, returning its commit set
"""

import logging
import random
from functools import lru_cache

from settlers.config import get_settings
from settlers.schemas.game_engine import BUILD_COSTS, BuildingKind, Game, GamePhase

from .actions import ActionRequest, ActionType
from .context import DiceRoller
from .pipeline import ActionRegistry, any_phase, in_phase
from .rules import (
    build_city,
    build_road,
    build_settlement,
    has_allowance,
    has_resources,
    init_road,
    init_settlement,
    is_current_player,
    offer_trade,
)
from .turns import end_turn
from .validation import ProcessResult

logger = logging.getLogger(__name__)


def create_default_registry(auto_end_setup_turn: bool | None = None) -> ActionRegistry:
    """Build and seal the standard route table.

    Args:
        auto_end_setup_turn: End the turn as part of placing a setup road.
            Defaults to the AUTO_END_SETUP_TURN setting.

    Returns:
        A sealed ActionRegistry.
    """
    if auto_end_setup_turn is None:
        auto_end_setup_turn = get_settings().AUTO_END_SETUP_TURN

    setup = in_phase(GamePhase.SETUP)
    playing = in_phase(GamePhase.PLAYING)
    registry = ActionRegistry()

    registry.register(ActionType.END_TURN, any_phase, [is_current_player, end_turn])
    registry.register(ActionType.TRADE_OFFER, any_phase, [is_current_player, offer_trade])

    setup_road = [is_current_player, init_road]
    if auto_end_setup_turn:
        setup_road.append(end_turn)
    registry.register(ActionType.BUILD_ROAD, setup, setup_road)
    registry.register(
        ActionType.BUILD_ROAD,
        playing,
        [
            is_current_player,
            has_resources(BUILD_COSTS[BuildingKind.ROAD]),
            has_allowance(BuildingKind.ROAD),
            build_road,
        ],
    )

    registry.register(ActionType.BUILD_SETTLEMENT, setup, [is_current_player, init_settlement])
    registry.register(
        ActionType.BUILD_SETTLEMENT,
        playing,
        [
            is_current_player,
            has_resources(BUILD_COSTS[BuildingKind.SETTLEMENT]),
            has_allowance(BuildingKind.SETTLEMENT),
            build_settlement,
        ],
    )

    registry.register(
        ActionType.BUILD_CITY,
        playing,
        [
            is_current_player,
            has_resources(BUILD_COSTS[BuildingKind.CITY]),
            has_allowance(BuildingKind.CITY),
            build_city,
        ],
    )

    logger.debug("Default registry built: routes=%d", len(registry.routes))
    return registry.seal()


@lru_cache
def get_default_registry() -> ActionRegistry:
    return create_default_registry()


@lru_cache
def _default_rng() -> random.Random:
    return random.Random(get_settings().DICE_SEED)


def _roll_default_die() -> int:
    return _default_rng().randint(1, 6)


def process_action(
    game: Game,
    request: ActionRequest,
    roll_die: DiceRoller | None = None,
    registry: ActionRegistry | None = None,
) -> ProcessResult:
    """Process a game action and return the result.

    This is the main entry point for all game actions. It:
    1. Selects the route for the action type and current phase
    2. Runs the route's steps against a fresh request context
    3. Returns the commit set, or the first rejection with no events

    Args:
        game: Current committed game state. Not modified.
        request: The action to process.
        roll_die: Die source for end-turn rolls; defaults to a generator
            seeded from DICE_SEED.
        registry: Route table; defaults to the standard table.

    Returns:
        ProcessResult containing:
        - success: Whether the action was accepted
        - events: The commit set (empty on failure)
        - error_code/error_message: Rejection details (if failed)

    Example:
        >>> result = process_action(game, request)
        >>> if result.success:
        ...     game = apply_events(game, result.events)
        ...     for event in result.events:
        ...         broadcast(event.to_message())
        ... else:
        ...     send_error(result.error_code, result.error_message)
    """
    logger.info(
        "Processing action: type=%s, player=%s, phase=%s, turn=%d",
        request.type.value,
        request.player_id,
        game.phase.value,
        game.turn,
    )
    logger.debug("Action data: %s", request.data)

    if registry is None:
        registry = get_default_registry()
    if roll_die is None:
        roll_die = _roll_default_die

    result = registry.dispatch(game, request, roll_die)

    if result.success:
        logger.info(
            "Action processed successfully: type=%s, player=%s, events_generated=%d",
            request.type.value,
            request.player_id,
            len(result.events),
        )
        logger.debug("Generated events: %s", [e.event_type for e in result.events])
    else:
        logger.warning(
            "Action rejected: type=%s, player=%s, error=%s, message=%s",
            request.type.value,
            request.player_id,
            result.error_code,
            result.error_message,
        )

    return result
